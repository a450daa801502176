"""
Priority classification and ordering for the course dashboard.

Maps each item to an urgency tier from its due date and status, and orders
merged item lists by tier then due date.

Tiers (days until due, relative to the processing date):
    - status "overdue": urgent
    - already past due: urgent
    - due within 3 days (inclusive): urgent
    - due within 7 days (inclusive): warning
    - later: safe
"""

from datetime import date
from typing import Any, Iterable, List, Optional

from coursedash.core.models import Item, Priority

URGENT_WITHIN_DAYS = 3
WARNING_WITHIN_DAYS = 7

_TIER_ORDER = tuple(Priority)


def calculate_priority(
    due_date: date,
    status: Optional[str],
    reference_date: date
) -> Priority:
    """
    Classify an item into an urgency tier.

    Pure function: identical inputs always give the same tier.

    Args:
        due_date: Calendar date the item is due
        status: Free-form status label
        reference_date: Processing date used as "today"

    Returns:
        Priority tier
    """
    if status == "overdue":
        return Priority.URGENT

    days_until_due = (due_date - reference_date).days

    if days_until_due < 0:
        return Priority.URGENT
    elif days_until_due <= URGENT_WITHIN_DAYS:
        return Priority.URGENT
    elif days_until_due <= WARNING_WITHIN_DAYS:
        return Priority.WARNING
    else:
        return Priority.SAFE


def priority_rank(priority: Any) -> int:
    """
    Position of a priority in the sort order.

    urgent < warning < safe; anything unrecognized (announcements may carry
    upstream values such as "high") ranks after safe.
    """
    try:
        return _TIER_ORDER.index(Priority(priority))
    except ValueError:
        return len(_TIER_ORDER)


def sort_items(items: Iterable[Item]) -> List[Item]:
    """
    Order items by priority rank, then ascending due date.

    The sort is stable, so items with equal (priority, due date) keep their
    merge order.
    """
    return sorted(items, key=lambda item: (priority_rank(item.priority), item.due_date))


def sort_by_due_date(items: Iterable[Item]) -> List[Item]:
    """Stable ascending sort on due date alone."""
    return sorted(items, key=lambda item: item.due_date)
