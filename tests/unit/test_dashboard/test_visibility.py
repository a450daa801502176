"""
Unit tests for the visibility module.
Tests role-based filtering of tasks and meetings.
"""

import pytest
from unittest.mock import MagicMock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from coursedash.core.errors import ItemConversionDropped
from coursedash.core.models import ItemType, Role
from coursedash.dashboard.sources import CourseAccessGateway
from coursedash.dashboard.visibility import VisibilityFilter


@pytest.fixture
def gateway():
    """Gateway granting access to course c1 only."""
    mock = MagicMock(spec=CourseAccessGateway)
    mock.can_access.side_effect = lambda user_id, role, course_id: course_id == "c1"
    return mock


@pytest.fixture
def visibility(gateway):
    return VisibilityFilter(gateway)


PUBLISHED_TASK = {"id": "t1", "courseId": "c1", "visibleToStudents": True, "published": True}


class TestAdmin:
    """Admins see every task and meeting."""

    def test_sees_task_without_course(self, visibility, gateway):
        assert visibility.is_visible({"id": "t1"}, ItemType.TASK, "u1", Role.ADMIN)
        gateway.can_access.assert_not_called()

    def test_sees_meeting_in_other_course(self, visibility):
        assert visibility.is_visible({"id": "m1", "courseId": "c9"}, ItemType.MEETING, "u1", Role.ADMIN)


class TestLecturer:
    """Lecturers see items of courses they can access."""

    def test_sees_task_in_accessible_course(self, visibility):
        assert visibility.is_visible({"id": "t1", "courseId": "c1"}, ItemType.TASK, "u1", Role.LECTURER)

    def test_does_not_see_task_elsewhere(self, visibility):
        assert not visibility.is_visible({"id": "t1", "courseId": "c2"}, ItemType.TASK, "u1", Role.LECTURER)

    def test_task_without_course_is_hidden(self, visibility, gateway):
        assert not visibility.is_visible({"id": "t1"}, ItemType.TASK, "u1", Role.LECTURER)
        gateway.can_access.assert_not_called()

    def test_sees_own_meeting_outside_course(self, visibility):
        meeting = {"id": "m1", "courseId": "c2", "createdBy": "u1"}
        assert visibility.is_visible(meeting, ItemType.MEETING, "u1", Role.LECTURER)

    def test_sees_meeting_as_assigned_lecturer(self, visibility):
        meeting = {"id": "m1", "courseId": "c2", "lecturerId": "u1"}
        assert visibility.is_visible(meeting, ItemType.MEETING, "u1", Role.LECTURER)

    def test_does_not_see_other_lecturers_meeting(self, visibility):
        meeting = {"id": "m1", "courseId": "c2", "createdBy": "u2", "lecturerId": "u3"}
        assert not visibility.is_visible(meeting, ItemType.MEETING, "u1", Role.LECTURER)


class TestStudent:
    """Students see published tasks of accessible courses."""

    def test_sees_published_task(self, visibility):
        assert visibility.is_visible(PUBLISHED_TASK, ItemType.TASK, "u1", Role.STUDENT)

    @pytest.mark.parametrize("field,value", [
        ("visibleToStudents", False),
        ("published", False),
        ("visibleToStudents", None),
        ("published", "true"),
    ])
    def test_hidden_unless_both_flags_are_true(self, visibility, field, value):
        task = {**PUBLISHED_TASK, field: value}
        assert not visibility.is_visible(task, ItemType.TASK, "u1", Role.STUDENT)

    def test_published_task_in_other_course_hidden(self, visibility):
        task = {**PUBLISHED_TASK, "courseId": "c2"}
        assert not visibility.is_visible(task, ItemType.TASK, "u1", Role.STUDENT)

    def test_sees_meeting_as_participant(self, visibility):
        meeting = {"id": "m1", "courseId": "c2", "participants": ["u7", "u1"]}
        assert visibility.is_visible(meeting, ItemType.MEETING, "u1", Role.STUDENT)

    def test_sees_meeting_in_accessible_course(self, visibility):
        assert visibility.is_visible({"id": "m1", "courseId": "c1"}, ItemType.MEETING, "u1", Role.STUDENT)

    def test_does_not_see_unrelated_meeting(self, visibility):
        meeting = {"id": "m1", "courseId": "c2", "participants": ["u7"]}
        assert not visibility.is_visible(meeting, ItemType.MEETING, "u1", Role.STUDENT)


class TestRoles:
    """Tests for role resolution."""

    def test_role_code_accepted(self, visibility):
        assert visibility.is_visible(PUBLISHED_TASK, ItemType.TASK, "u1", "1300")

    def test_role_name_accepted(self, visibility):
        assert visibility.is_visible({"id": "t1"}, ItemType.TASK, "u1", "admin")

    def test_unknown_role_sees_nothing(self, visibility):
        assert not visibility.is_visible(PUBLISHED_TASK, ItemType.TASK, "u1", "9999")
        assert not visibility.is_visible(PUBLISHED_TASK, ItemType.TASK, "u1", None)

    def test_announcements_always_visible(self, visibility, gateway):
        assert visibility.is_visible({"id": "a1"}, ItemType.ANNOUNCEMENT, "u1", None)
        gateway.can_access.assert_not_called()


class TestFailures:
    """Errors during a check exclude the item."""

    def test_gateway_error_hides_item(self, visibility, gateway):
        gateway.can_access.side_effect = RuntimeError("connection reset")
        assert not visibility.is_visible(PUBLISHED_TASK, ItemType.TASK, "u1", Role.STUDENT)

    def test_check_raises_conversion_dropped(self, visibility, gateway):
        gateway.can_access.side_effect = RuntimeError("connection reset")

        with pytest.raises(ItemConversionDropped) as exc_info:
            visibility.check(PUBLISHED_TASK, ItemType.TASK, "u1", Role.STUDENT)

        assert exc_info.value.record_id == "t1"
        assert "connection reset" in str(exc_info.value)
