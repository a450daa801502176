"""
Browser extension API endpoints.

Resolves the requesting user by email, then serves the aggregated
dashboard, filtered task lists, announcements, stats, urgent items and
meeting details from the DashboardAggregator.
"""

import logging
from typing import Callable, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.dependencies import get_dashboard_aggregator, get_user_directory
from backend.schemas import (
    AnnouncementsResponse,
    DashboardResponse,
    ItemResponse,
    StatsResponse,
    TasksResponse,
    UrgentItemsResponse,
)
from coursedash.core.errors import NotFound, UpstreamUnavailable, ValidationError
from coursedash.core.models import UserRecord
from coursedash.core.users import UserDirectory
from coursedash.dashboard.aggregator import DashboardAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/extension", tags=["extension"])

T = TypeVar("T")


def _require_email(email: Optional[str]) -> str:
    """Reject missing or blank email before touching the user directory."""
    if email is None or not email.strip():
        raise ValidationError("email", "Email parameter is required")
    return email.strip()


def _require_limit(limit: int) -> int:
    if limit < 0:
        raise ValidationError("limit", "limit must not be negative")
    return limit


def _handle(operation: str, action: Callable[[], T]) -> T:
    """
    Run an endpoint body and map domain errors to HTTP responses.

    ValidationError -> 400, NotFound -> 404, UpstreamUnavailable and a
    missing users database -> 500.
    """
    try:
        return action()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        logger.info(f"{operation}: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamUnavailable as e:
        logger.error(f"Error getting {operation}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to load {operation}: {e}")
    except FileNotFoundError as e:
        logger.error(f"Error getting {operation}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to load {operation}: user directory unavailable")


def _resolve(directory: UserDirectory, email: Optional[str]) -> UserRecord:
    return directory.resolve(_require_email(email))


@router.get("/dashboard", response_model=DashboardResponse, response_model_exclude_none=True)
def get_dashboard(
    email: Optional[str] = Query(None, description="Email of the requesting user"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    Get the prioritized dashboard for a user.

    Items are ordered urgent, warning, safe, then by due date.
    """
    def action():
        user = _resolve(directory, email)
        data = aggregator.get_dashboard(user.user_id, user.role)
        logger.info(f"Dashboard data retrieved with {len(data.items)} items for {user.email}")
        return DashboardResponse.from_data(data)

    return _handle("dashboard", action)


@router.get("/tasks", response_model=TasksResponse, response_model_exclude_none=True)
def get_tasks(
    email: Optional[str] = Query(None, description="Email of the requesting user"),
    status: Optional[str] = Query(None, description="Filter by status ('all' for any)"),
    priority: Optional[str] = Query(None, description="Filter by priority ('all' for any)"),
    type: Optional[str] = Query(None, description="'meeting' or 'all' also includes meetings"),
    limit: int = Query(20, description="Maximum number of items"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Get tasks and meetings with optional status/priority filters."""
    def action():
        user = _resolve(directory, email)
        items = aggregator.get_tasks(
            user.user_id, user.role,
            status=status, priority=priority, type=type, limit=_require_limit(limit),
        )
        return TasksResponse(
            tasks=[ItemResponse.from_item(item) for item in items],
            count=len(items),
        )

    return _handle("tasks", action)


@router.get("/announcements", response_model=AnnouncementsResponse, response_model_exclude_none=True)
def get_announcements(
    email: Optional[str] = Query(None, description="Email of the requesting user"),
    limit: int = Query(10, description="Maximum number of announcements"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Get announcements addressed to a user."""
    def action():
        user = _resolve(directory, email)
        items = aggregator.get_announcements(user.user_id, limit=_require_limit(limit))
        return AnnouncementsResponse(
            announcements=[ItemResponse.from_item(item) for item in items],
            count=len(items),
        )

    return _handle("announcements", action)


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    email: Optional[str] = Query(None, description="Email of the requesting user"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    directory: UserDirectory = Depends(get_user_directory),
):
    """
    Get just the statistics portion of the dashboard.

    Lighter-weight response for badge counters.
    """
    def action():
        user = _resolve(directory, email)
        return StatsResponse.from_stats(aggregator.get_user_stats(user.user_id, user.role))

    return _handle("stats", action)


@router.get("/urgent", response_model=UrgentItemsResponse, response_model_exclude_none=True)
def get_urgent_items(
    email: Optional[str] = Query(None, description="Email of the requesting user"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Get urgent items, soonest due first."""
    def action():
        user = _resolve(directory, email)
        items = aggregator.get_urgent_items(user.user_id, user.role)
        return UrgentItemsResponse(
            urgent_items=[ItemResponse.from_item(item) for item in items],
            count=len(items),
        )

    return _handle("urgent items", action)


@router.get("/meeting/{meeting_id}")
def get_meeting_details(
    meeting_id: str,
    email: Optional[str] = Query(None, description="Email of the requesting user"),
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
):
    """Get the raw meeting record so the extension can join it."""
    def action():
        requester = _require_email(email)
        if not meeting_id.strip():
            raise ValidationError("meeting_id", "Meeting ID is required")
        return aggregator.get_meeting_details(meeting_id.strip(), email=requester)

    return _handle("meeting details", action)
