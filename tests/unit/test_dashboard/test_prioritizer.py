"""
Unit tests for the prioritizer module.
Tests priority tiers and dashboard ordering.
"""

import pytest
from datetime import date, timedelta

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from coursedash.core.models import Item, ItemType, Priority
from coursedash.dashboard.prioritizer import (
    calculate_priority,
    priority_rank,
    sort_items,
    sort_by_due_date,
)

TODAY = date(2024, 1, 10)


def make_item(item_id, priority="safe", due=TODAY, item_type=ItemType.TASK):
    return Item(id=item_id, type=item_type, due_date=due, course="Algorithms", priority=priority)


class TestCalculatePriority:
    """Tests for urgency tier classification."""

    def test_due_in_two_days_is_urgent(self):
        """Due 2024-01-12 with status pending is urgent."""
        assert calculate_priority(date(2024, 1, 12), "pending", TODAY) == Priority.URGENT

    def test_due_in_ten_days_is_safe(self):
        """Due 2024-01-20 is safe."""
        assert calculate_priority(date(2024, 1, 20), "pending", TODAY) == Priority.SAFE

    def test_past_due_is_urgent(self):
        """Due 2024-01-05 is already past, so urgent."""
        assert calculate_priority(date(2024, 1, 5), "pending", TODAY) == Priority.URGENT

    def test_overdue_status_is_urgent_regardless_of_date(self):
        """An 'overdue' status wins over a far due date."""
        far = TODAY + timedelta(days=100)
        assert calculate_priority(far, "overdue", TODAY) == Priority.URGENT

    @pytest.mark.parametrize("days,expected", [
        (0, Priority.URGENT),
        (3, Priority.URGENT),
        (4, Priority.WARNING),
        (7, Priority.WARNING),
        (8, Priority.SAFE),
    ])
    def test_tier_boundaries_are_inclusive(self, days, expected):
        """Three and seven days sit inside the urgent and warning tiers."""
        assert calculate_priority(TODAY + timedelta(days=days), "pending", TODAY) == expected

    def test_missing_status_uses_date_only(self):
        assert calculate_priority(TODAY + timedelta(days=5), None, TODAY) == Priority.WARNING

    def test_is_deterministic(self):
        """Same inputs always give the same tier."""
        due = TODAY + timedelta(days=6)
        results = {calculate_priority(due, "pending", TODAY) for _ in range(10)}
        assert results == {Priority.WARNING}


class TestPriorityRank:
    """Tests for sort rank of priority values."""

    def test_known_tiers_in_order(self):
        assert priority_rank("urgent") < priority_rank("warning") < priority_rank("safe")

    def test_accepts_enum_members(self):
        assert priority_rank(Priority.URGENT) == priority_rank("urgent")

    def test_unknown_priority_ranks_last(self):
        """Upstream announcement priorities like 'high' sort after safe."""
        assert priority_rank("high") > priority_rank("safe")
        assert priority_rank(None) == priority_rank("high")


class TestSortItems:
    """Tests for dashboard ordering."""

    def test_orders_by_priority_then_due_date(self):
        items = [
            make_item("safe", "safe", TODAY + timedelta(days=20)),
            make_item("urgent-late", "urgent", TODAY + timedelta(days=2)),
            make_item("warning", "warning", TODAY + timedelta(days=5)),
            make_item("urgent-early", "urgent", TODAY - timedelta(days=1)),
        ]

        result = sort_items(items)

        assert [i.id for i in result] == ["urgent-early", "urgent-late", "warning", "safe"]

    def test_equal_keys_keep_input_order(self):
        """Sort is stable for equal (priority, due date)."""
        items = [
            make_item("task", item_type=ItemType.TASK),
            make_item("meeting", item_type=ItemType.MEETING),
            make_item("announcement", item_type=ItemType.ANNOUNCEMENT),
        ]

        result = sort_items(items)

        assert [i.id for i in result] == ["task", "meeting", "announcement"]

    def test_unknown_priority_sorted_after_safe(self):
        items = [
            make_item("high", "high", TODAY),
            make_item("safe", "safe", TODAY + timedelta(days=30)),
        ]

        assert [i.id for i in sort_items(items)] == ["safe", "high"]

    def test_does_not_mutate_input(self):
        items = [make_item("b", "safe"), make_item("a", "urgent")]
        sort_items(items)
        assert [i.id for i in items] == ["b", "a"]

    def test_empty_list(self):
        assert sort_items([]) == []


class TestSortByDueDate:
    """Tests for due-date-only ordering."""

    def test_ignores_priority(self):
        items = [
            make_item("later", "urgent", TODAY + timedelta(days=2)),
            make_item("sooner", "safe", TODAY - timedelta(days=3)),
        ]

        assert [i.id for i in sort_by_due_date(items)] == ["sooner", "later"]
