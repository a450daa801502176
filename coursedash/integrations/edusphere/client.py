#!/usr/bin/env python3
"""
EduSphere course service client for the course dashboard.

Implements ItemSource, CourseAccessGateway and CourseCatalog over the
service's JSON HTTP API. Fetch methods raise UpstreamUnavailable on any
transport or decoding failure; the access check and the course name lookup
degrade to False and "Unknown Course" instead of raising.

No retries are attempted here; a failed fetch fails the request.
"""

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from coursedash.core.config import Config
from coursedash.core.errors import NotFound, UpstreamUnavailable
from coursedash.core.models import Role
from coursedash.dashboard.sources import (
    CourseAccessGateway,
    CourseCatalog,
    ItemSource,
    UNKNOWN_COURSE,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds
USER_AGENT = "coursedash/1.0"


class EduSphereClient(ItemSource, CourseAccessGateway, CourseCatalog):
    """
    HTTP client for the EduSphere course service.

    Usage:
        client = EduSphereClient.from_config(config)
        courses = client.fetch_user_courses(user_id, Role.STUDENT)
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the client.

        Args:
            base_url: Service API root, e.g. http://localhost:8082/api
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config) -> 'EduSphereClient':
        return cls(
            config.get_service_url(),
            timeout=float(config.get("request_timeout", default=DEFAULT_TIMEOUT)),
        )

    def _url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        url = f"{self.base_url}{path}"
        if params:
            url += "?" + urllib.parse.urlencode(params)
        return url

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a JSON document.

        Raises:
            urllib.error.HTTPError: On a non-2xx response
            urllib.error.URLError: On connection failures
            ValueError: If the body is not valid JSON
        """
        url = self._url(path, params)
        request = urllib.request.Request(
            url,
            headers={
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )
        with urllib.request.urlopen(request, timeout=self.timeout) as response:
            body = response.read().decode("utf-8")

        if not body.strip():
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            # Some endpoints answer with bare text (course names)
            return body

    def _get_list(self, operation: str, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            payload = self._get(path, params)
        except urllib.error.HTTPError as e:
            logger.error(f"HTTP error calling {path}: {e.code} {e.reason}")
            raise UpstreamUnavailable(operation, f"HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            logger.error(f"Error calling {path}: {e}")
            raise UpstreamUnavailable(operation, str(e)) from e

        if payload is None:
            return []
        if not isinstance(payload, list):
            raise UpstreamUnavailable(operation, f"expected a list, got {type(payload).__name__}")
        return [record for record in payload if isinstance(record, dict)]

    # ItemSource

    def fetch_user_courses(self, user_id: str, role: Optional[Role]) -> List[Dict[str, Any]]:
        params = {"userId": user_id, "userRole": role.code if role else ""}
        return self._get_list("user courses", "/courses/user-courses", params)

    def fetch_tasks(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        if not course_ids:
            return []
        return self._get_list("tasks", "/tasks/by-courses", {"courseIds": ",".join(course_ids)})

    def fetch_meetings(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        if not course_ids:
            return []
        return self._get_list("meetings", "/meetings/by-courses", {"courseIds": ",".join(course_ids)})

    def fetch_announcements(self, user_id: str) -> List[Dict[str, Any]]:
        return self._get_list("announcements", "/announcements/for-user", {"userId": user_id})

    def fetch_meeting(self, meeting_id: str, email: Optional[str] = None) -> Dict[str, Any]:
        path = f"/meetings/{urllib.parse.quote(str(meeting_id), safe='')}"
        params = {"email": email} if email else None
        try:
            payload = self._get(path, params)
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise NotFound("Meeting", meeting_id) from e
            logger.error(f"HTTP error getting meeting {meeting_id}: {e.code} {e.reason}")
            raise UpstreamUnavailable("meeting details", f"HTTP {e.code}") from e
        except (urllib.error.URLError, OSError) as e:
            logger.error(f"Error getting meeting {meeting_id}: {e}")
            raise UpstreamUnavailable("meeting details", str(e)) from e

        if not isinstance(payload, dict):
            raise NotFound("Meeting", meeting_id)
        return payload

    # CourseAccessGateway

    def can_access(self, user_id: str, role: Optional[Role], course_id: str) -> bool:
        params = {
            "userId": user_id,
            "userRole": role.code if role else "",
            "courseId": course_id,
        }
        try:
            return self._get("/courses/can-access", params) is True
        except Exception as e:
            logger.warning(f"Error checking course access for {course_id}: {e}")
            return False

    # CourseCatalog

    def get_course_name(self, course_id: str) -> str:
        path = f"/courses/name/{urllib.parse.quote(str(course_id), safe='')}"
        try:
            name = self._get(path)
        except Exception as e:
            logger.warning(f"Error getting course name for {course_id}: {e}")
            return UNKNOWN_COURSE
        if not isinstance(name, str) or not name.strip():
            return UNKNOWN_COURSE
        return name
