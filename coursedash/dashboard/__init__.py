"""
Dashboard module for the course dashboard.

Provides visibility filtering, normalization, priority classification,
aggregation, statistics, and CLI formatting.
"""

from .prioritizer import (
    calculate_priority,
    priority_rank,
    sort_items,
    sort_by_due_date,
)
from .normalizer import ItemNormalizer, NormalizeResult, extract_date
from .visibility import VisibilityFilter
from .stats import calculate_stats, completion_rate
from .sources import ItemSource, CourseAccessGateway, CourseCatalog, UNKNOWN_COURSE
from .aggregator import DashboardAggregator
from .formatter import DashboardFormatter

__all__ = [
    # Prioritizer
    'calculate_priority',
    'priority_rank',
    'sort_items',
    'sort_by_due_date',
    # Normalizer
    'ItemNormalizer',
    'NormalizeResult',
    'extract_date',
    # Visibility
    'VisibilityFilter',
    # Stats
    'calculate_stats',
    'completion_rate',
    # Collaborators
    'ItemSource',
    'CourseAccessGateway',
    'CourseCatalog',
    'UNKNOWN_COURSE',
    # Aggregator
    'DashboardAggregator',
    # Formatter
    'DashboardFormatter',
]
