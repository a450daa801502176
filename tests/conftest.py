"""
Shared fixtures for the course dashboard tests.

Provides an in-memory course service implementing all three collaborator
interfaces, so the aggregator and the API can run without the network.
"""

import threading
from typing import Any, Dict, List, Optional

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from coursedash.core.errors import NotFound
from coursedash.core.models import Role
from coursedash.dashboard.sources import (
    CourseAccessGateway,
    CourseCatalog,
    ItemSource,
    UNKNOWN_COURSE,
)


class InMemoryCourseService(ItemSource, CourseAccessGateway, CourseCatalog):
    """
    Course service double backed by plain lists.

    Records every call by name in `calls`; an exception stored in
    `failures[name]` is raised by that call instead of returning data.
    """

    def __init__(self):
        self.courses: List[Dict[str, Any]] = []
        self.tasks: List[Dict[str, Any]] = []
        self.meetings: List[Dict[str, Any]] = []
        self.announcements: List[Dict[str, Any]] = []
        self.meetings_by_id: Dict[str, Dict[str, Any]] = {}
        self.meeting_emails: List[Optional[str]] = []
        self.accessible_courses = set()
        self.course_names: Dict[str, str] = {}
        self.failures: Dict[str, Exception] = {}
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def _record(self, name: str) -> None:
        with self._lock:
            self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def fetch_user_courses(self, user_id: str, role: Optional[Role]) -> List[Dict[str, Any]]:
        self._record("user_courses")
        return list(self.courses)

    def fetch_tasks(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        self._record("tasks")
        return list(self.tasks)

    def fetch_meetings(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        self._record("meetings")
        return list(self.meetings)

    def fetch_announcements(self, user_id: str) -> List[Dict[str, Any]]:
        self._record("announcements")
        return list(self.announcements)

    def fetch_meeting(self, meeting_id: str, email: Optional[str] = None) -> Dict[str, Any]:
        self._record("meeting")
        self.meeting_emails.append(email)
        if meeting_id not in self.meetings_by_id:
            raise NotFound("Meeting", meeting_id)
        return self.meetings_by_id[meeting_id]

    def can_access(self, user_id: str, role: Optional[Role], course_id: str) -> bool:
        self._record("can_access")
        return course_id in self.accessible_courses

    def get_course_name(self, course_id: str) -> str:
        return self.course_names.get(course_id, UNKNOWN_COURSE)

    def fetches(self) -> List[str]:
        """Data fetches made so far, excluding access checks."""
        return [name for name in self.calls if name != "can_access"]


@pytest.fixture
def course_service():
    """Empty in-memory course service; tests fill in the lists they need."""
    return InMemoryCourseService()
