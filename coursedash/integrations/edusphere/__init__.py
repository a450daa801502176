"""
EduSphere course service integration.
"""

from .client import EduSphereClient

__all__ = ['EduSphereClient']
