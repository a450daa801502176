"""
Role-aware visibility rules for dashboard items.

Each role carries one predicate per item type. Roles without a rule, unknown
roles and errors raised while checking all resolve to "not visible".
Announcements are not filtered here: the upstream fetch already scopes them
to the requesting user.
"""

import logging
from typing import Any, Callable, Dict

from coursedash.core.errors import ItemConversionDropped
from coursedash.core.models import ItemType, RawRecord, Role
from coursedash.dashboard.sources import CourseAccessGateway

logger = logging.getLogger(__name__)

Rule = Callable[['VisibilityFilter', RawRecord, str, Role], bool]


class VisibilityFilter:
    """Decides whether a raw task or meeting is visible to a requester."""

    def __init__(self, gateway: CourseAccessGateway):
        self.gateway = gateway

    def is_visible(
        self,
        raw: Dict[str, Any],
        item_type: ItemType,
        user_id: str,
        role: Any
    ) -> bool:
        """
        Check visibility, failing closed.

        Args:
            raw: Raw upstream record
            item_type: Type of the record
            user_id: Requesting user id
            role: Requesting user role (Role, code or name)

        Returns:
            True if the requester may see the item
        """
        try:
            return self.check(raw, item_type, user_id, role)
        except ItemConversionDropped as e:
            logger.debug(str(e))
            return False

    def check(
        self,
        raw: Dict[str, Any],
        item_type: ItemType,
        user_id: str,
        role: Any
    ) -> bool:
        """
        Like is_visible, but an error during the check raises
        ItemConversionDropped so callers can count it.
        """
        item_type = ItemType(item_type)
        if item_type == ItemType.ANNOUNCEMENT:
            return True

        resolved = Role.parse(role)
        if resolved is None:
            return False

        rule = _RULES.get(item_type, {}).get(resolved)
        if rule is None:
            return False

        record = RawRecord(raw)
        try:
            return bool(rule(self, record, user_id, resolved))
        except Exception as e:
            logger.warning(f"Error checking {item_type.value} visibility: {e}")
            raise ItemConversionDropped(item_type.value, f"visibility check failed: {e}",
                                        record.text("id")) from e

    def _course_accessible(self, record: RawRecord, user_id: str, role: Role) -> bool:
        course_id = record.text("courseId")
        return course_id is not None and self.gateway.can_access(user_id, role, course_id)

    # Tasks

    def _admin_sees(self, record: RawRecord, user_id: str, role: Role) -> bool:
        return True

    def _lecturer_sees_task(self, record: RawRecord, user_id: str, role: Role) -> bool:
        return self._course_accessible(record, user_id, role)

    def _student_sees_task(self, record: RawRecord, user_id: str, role: Role) -> bool:
        return (
            record.flag("visibleToStudents")
            and record.flag("published")
            and self._course_accessible(record, user_id, role)
        )

    # Meetings

    def _lecturer_sees_meeting(self, record: RawRecord, user_id: str, role: Role) -> bool:
        return (
            self._course_accessible(record, user_id, role)
            or user_id == record.text("createdBy")
            or user_id == record.text("lecturerId")
        )

    def _student_sees_meeting(self, record: RawRecord, user_id: str, role: Role) -> bool:
        return (
            self._course_accessible(record, user_id, role)
            or user_id in record.strings("participants")
        )


_RULES: Dict[ItemType, Dict[Role, Rule]] = {
    ItemType.TASK: {
        Role.ADMIN: VisibilityFilter._admin_sees,
        Role.LECTURER: VisibilityFilter._lecturer_sees_task,
        Role.STUDENT: VisibilityFilter._student_sees_task,
    },
    ItemType.MEETING: {
        Role.ADMIN: VisibilityFilter._admin_sees,
        Role.LECTURER: VisibilityFilter._lecturer_sees_meeting,
        Role.STUDENT: VisibilityFilter._student_sees_meeting,
    },
}
