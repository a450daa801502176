"""
coursedash - prioritized course dashboard for the browser extension.
"""

__version__ = "1.0.0"
