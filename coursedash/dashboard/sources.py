"""
Collaborator interfaces for the dashboard pipeline.

The aggregator only talks to these abstractions; EduSphereClient implements
all three over HTTP, and tests implement them in memory.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from coursedash.core.models import Role

UNKNOWN_COURSE = "Unknown Course"


class ItemSource(ABC):
    """Fetches raw course, task, meeting and announcement records."""

    @abstractmethod
    def fetch_user_courses(self, user_id: str, role: Optional[Role]) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def fetch_tasks(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def fetch_meetings(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def fetch_announcements(self, user_id: str) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    def fetch_meeting(self, meeting_id: str, email: Optional[str] = None) -> Dict[str, Any]:
        """
        Raises NotFound for an unknown meeting id.

        email identifies the requester to the course service when given.
        """
        pass


class CourseAccessGateway(ABC):
    """Answers whether a user may act on a course."""

    @abstractmethod
    def can_access(self, user_id: str, role: Optional[Role], course_id: str) -> bool:
        """Must return False instead of raising on internal errors."""
        pass


class CourseCatalog(ABC):
    """Resolves course ids to display names."""

    @abstractmethod
    def get_course_name(self, course_id: str) -> str:
        """Must return UNKNOWN_COURSE instead of raising on failure."""
        pass
