"""
Core module for the course dashboard
Contains configuration, errors, the user directory, and model definitions
"""

from .config import Config
from .database import SQLiteDatabase
from .errors import (
    CourseDashError,
    ValidationError,
    NotFound,
    UpstreamUnavailable,
    ItemConversionDropped,
)
from .models import (
    Item,
    ItemType,
    Priority,
    Role,
    RawRecord,
    DashboardStats,
    DashboardData,
    UserRecord,
)
from .users import UserDirectory

__all__ = [
    'Config', 'SQLiteDatabase', 'UserDirectory',
    'CourseDashError', 'ValidationError', 'NotFound', 'UpstreamUnavailable',
    'ItemConversionDropped',
    'Item', 'ItemType', 'Priority', 'Role', 'RawRecord',
    'DashboardStats', 'DashboardData', 'UserRecord',
]
