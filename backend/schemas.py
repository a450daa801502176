"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Type safety for API outputs
- OpenAPI documentation generation
- camelCase serialization matching what the browser extension reads

Design note: fields are declared in snake_case and serialized through a
camelCase alias generator; routes exclude None so absent item fields never
show up as nulls.
"""

from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from coursedash.core.models import DashboardData, DashboardStats, Item


class CamelModel(BaseModel):
    """Base model serializing to camelCase."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# =============================================================================
# Base Response Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str


# =============================================================================
# Item Schemas
# =============================================================================

class ItemResponse(CamelModel):
    """Dashboard item returned from API."""
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    type: str
    due_date: str
    course: str
    status: str
    priority: str
    category: Optional[str] = None
    max_points: Optional[int] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    location: Optional[str] = None
    is_important: Optional[bool] = None
    announcement_type: Optional[str] = None

    @classmethod
    def from_item(cls, item: Item) -> 'ItemResponse':
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            type=item.type.value,
            due_date=item.due_date.isoformat(),
            course=item.course,
            status=item.status,
            priority=str(item.priority),
            category=item.category,
            max_points=item.max_points,
            file_url=item.file_url,
            file_name=item.file_name,
            location=item.location,
            is_important=item.is_important,
            announcement_type=item.announcement_type,
        )


# =============================================================================
# Stats Schemas
# =============================================================================

class StatsResponse(CamelModel):
    """Dashboard statistics."""
    total_items: int
    urgent_items: int
    pending_items: int
    completed_items: int
    overdue_items: int
    tasks_count: int
    meetings_count: int
    announcements_count: int
    completion_rate: float
    this_week_due: int
    next_week_due: int

    @classmethod
    def from_stats(cls, stats: DashboardStats) -> 'StatsResponse':
        return cls(
            total_items=stats.total,
            urgent_items=stats.urgent,
            pending_items=stats.pending,
            completed_items=stats.completed,
            overdue_items=stats.overdue,
            tasks_count=stats.tasks,
            meetings_count=stats.meetings,
            announcements_count=stats.announcements,
            completion_rate=stats.completion_rate,
            this_week_due=stats.this_week_due,
            next_week_due=stats.next_week_due,
        )


# =============================================================================
# Endpoint Responses
# =============================================================================

class DashboardResponse(CamelModel):
    """Complete dashboard: sorted items plus stats."""
    items: List[ItemResponse]
    stats: StatsResponse

    @classmethod
    def from_data(cls, data: DashboardData) -> 'DashboardResponse':
        return cls(
            items=[ItemResponse.from_item(item) for item in data.items],
            stats=StatsResponse.from_stats(data.stats),
        )


class TasksResponse(CamelModel):
    """Response for the filtered task list."""
    success: bool = True
    tasks: List[ItemResponse]
    count: int


class AnnouncementsResponse(CamelModel):
    """Response for the announcement list."""
    success: bool = True
    announcements: List[ItemResponse]
    count: int


class UrgentItemsResponse(CamelModel):
    """Response for urgent items."""
    success: bool = True
    urgent_items: List[ItemResponse]
    count: int
