"""
Integrations with external course services.
"""
