"""
API routers for the course dashboard backend.

- extension: dashboard, tasks, announcements, stats, urgent items and
  meeting details for the browser extension
"""

from .extension import router as extension_router

__all__ = [
    'extension_router',
]
