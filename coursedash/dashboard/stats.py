"""
Summary statistics for the course dashboard.

Counters are plain equality counts over the final item list; the due-date
windows are anchored at the processing date:

    this week: today <= due <= today + 7
    next week: today + 7 < due <= today + 14
"""

import math
from datetime import date, timedelta
from typing import Sequence

from coursedash.core.models import DashboardStats, Item, ItemType, Priority, count_where

WEEK = timedelta(weeks=1)


def round_half_up(value: float, places: int = 2) -> float:
    """Round a non-negative value half-up to the given decimal places."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed items, 0.0 for an empty list."""
    if total <= 0:
        return 0.0
    return round_half_up(completed * 100.0 / total)


def _in_window(item: Item, start: date, end: date, include_start: bool) -> bool:
    due = item.due_date
    if not isinstance(due, date):
        return False
    after_start = due >= start if include_start else due > start
    return after_start and due <= end


def calculate_stats(items: Sequence[Item], today: date) -> DashboardStats:
    """
    Derive dashboard statistics from a sorted item list.

    Args:
        items: Final item list for the request
        today: Processing date

    Returns:
        DashboardStats for these items
    """
    total = len(items)
    completed = count_where(items, status="completed")

    this_week_end = today + WEEK
    next_week_end = today + 2 * WEEK

    return DashboardStats(
        total=total,
        urgent=count_where(items, priority=Priority.URGENT.value),
        pending=count_where(items, status="pending"),
        completed=completed,
        overdue=count_where(items, status="overdue"),
        tasks=count_where(items, type=ItemType.TASK),
        meetings=count_where(items, type=ItemType.MEETING),
        announcements=count_where(items, type=ItemType.ANNOUNCEMENT),
        completion_rate=completion_rate(completed, total),
        this_week_due=sum(1 for i in items if _in_window(i, today, this_week_end, True)),
        next_week_due=sum(1 for i in items if _in_window(i, this_week_end, next_week_end, False)),
    )
