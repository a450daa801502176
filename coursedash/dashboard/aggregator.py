"""
Data aggregation module for the course dashboard.

Collects tasks, meetings and announcements from the course service, filters
them by role, normalizes them into Items, and combines them into a sorted
DashboardData structure with summary statistics.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from coursedash.core.config import Config
from coursedash.core.errors import ItemConversionDropped, NotFound, UpstreamUnavailable
from coursedash.core.models import DashboardData, DashboardStats, Item, ItemType, Priority, Role
from coursedash.dashboard.normalizer import ItemNormalizer
from coursedash.dashboard.prioritizer import sort_by_due_date, sort_items
from coursedash.dashboard.sources import CourseAccessGateway, CourseCatalog, ItemSource
from coursedash.dashboard.stats import calculate_stats
from coursedash.dashboard.visibility import VisibilityFilter

logger = logging.getLogger(__name__)

MATCH_ALL = "all"


@dataclass
class _Branch:
    """Items produced by one item type, plus how many records were dropped."""
    items: List[Item]
    dropped: int = 0


def _matches(value: Optional[str], wanted: Optional[str]) -> bool:
    return wanted is None or wanted == MATCH_ALL or wanted == value


class DashboardAggregator:
    """
    Central data aggregation for the extension dashboard.

    Every call is request-scoped: the processing date is fixed once per call
    and nothing is cached between calls.
    """

    def __init__(
        self,
        source: ItemSource,
        gateway: CourseAccessGateway,
        catalog: CourseCatalog,
        config: Optional[Config] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize aggregator.

        Args:
            source: Fetches raw records
            gateway: Course access checks for visibility
            catalog: Course name lookup for normalization
            config: Configuration (fetch_workers setting)
            max_workers: Overrides the configured fetch concurrency
        """
        self.source = source
        self.gateway = gateway
        self.catalog = catalog
        self.config = config
        self.visibility = VisibilityFilter(gateway)

        if max_workers is None:
            max_workers = config.get("fetch_workers", default=3) if config else 3
        self.max_workers = max(1, int(max_workers))

    def _fetch(self, operation: str, fetch: Callable[..., Any], *args: Any) -> Any:
        """Run one collaborator fetch, mapping any failure to UpstreamUnavailable."""
        try:
            return fetch(*args)
        except UpstreamUnavailable:
            raise
        except Exception as e:
            raise UpstreamUnavailable(operation, str(e)) from e

    def _fetch_all(self, calls: Dict[str, Tuple[Callable[..., Any], tuple]]) -> Dict[str, Any]:
        """
        Issue independent fetches concurrently and join on all of them.

        Returns only once every fetch has finished, or raises as soon as one
        has failed (pending fetches are cancelled).
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                name: executor.submit(self._fetch, name, fetch, *args)
                for name, (fetch, args) in calls.items()
            }
            done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)

            for name, future in futures.items():
                if future in done and future.exception() is not None:
                    for other in pending:
                        other.cancel()
                    error = future.exception()
                    logger.error(f"Failed to fetch {name}: {error}", exc_info=error)
                    raise error

            return {name: future.result() for name, future in futures.items()}

    def get_course_ids(self, user_id: str, role: Optional[Role]) -> List[str]:
        """Ids of the courses this user is attached to."""
        courses = self._fetch("user courses", self.source.fetch_user_courses, user_id, role)
        course_ids = [
            str(course["id"])
            for course in courses or []
            if isinstance(course, dict) and course.get("id") is not None
        ]
        logger.info(f"Found {len(course_ids)} courses for user {user_id}")
        return course_ids

    def _build_branch(
        self,
        records: List[Dict[str, Any]],
        item_type: ItemType,
        normalizer: ItemNormalizer,
        user_id: str,
        role: Optional[Role],
    ) -> _Branch:
        """Filter, then normalize, one type's records in fetch order."""
        branch = _Branch(items=[])
        for raw in records or []:
            try:
                if not self.visibility.check(raw, item_type, user_id, role):
                    continue
            except ItemConversionDropped:
                branch.dropped += 1
                continue
            result = normalizer.try_normalize(raw, item_type)
            if result.ok:
                branch.items.append(result.item)
            else:
                branch.dropped += 1
        logger.info(
            f"Added {len(branch.items)} {item_type.value} items "
            f"({len(records or [])} fetched, {branch.dropped} dropped)"
        )
        return branch

    def get_dashboard(
        self,
        user_id: str,
        role: Any,
        today: Optional[date] = None
    ) -> DashboardData:
        """
        Aggregate all data for the dashboard.

        Main entry point for collecting dashboard data.

        Args:
            user_id: Requesting user id
            role: Requesting user role (Role, code or name)
            today: Processing date (defaults to today)

        Returns:
            Complete DashboardData structure

        Raises:
            UpstreamUnavailable: If any fetch from the course service fails
        """
        if today is None:
            today = date.today()
        role = Role.parse(role)

        logger.info(f"Getting dashboard data for user {user_id}, role {role}")
        course_ids = self.get_course_ids(user_id, role)
        if not course_ids:
            logger.info("No course ids found, returning empty dashboard")
            return DashboardData.empty(today)

        fetched = self._fetch_all({
            "tasks": (self.source.fetch_tasks, (course_ids,)),
            "meetings": (self.source.fetch_meetings, (course_ids,)),
            "announcements": (self.source.fetch_announcements, (user_id,)),
        })

        normalizer = ItemNormalizer(self.catalog, today)
        branches = [
            self._build_branch(fetched["tasks"], ItemType.TASK, normalizer, user_id, role),
            self._build_branch(fetched["meetings"], ItemType.MEETING, normalizer, user_id, role),
            self._build_branch(fetched["announcements"], ItemType.ANNOUNCEMENT, normalizer, user_id, role),
        ]

        merged = [item for branch in branches for item in branch.items]
        dropped = sum(branch.dropped for branch in branches)
        items = sort_items(merged)
        stats = calculate_stats(items, today)

        if dropped:
            logger.warning(f"Dropped {dropped} records while building dashboard for {user_id}")
        logger.info(f"Dashboard data prepared with {len(items)} total items")

        return DashboardData(
            items=tuple(items),
            stats=stats,
            generated_on=today,
            dropped=dropped,
        )

    def get_tasks(
        self,
        user_id: str,
        role: Any,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        type: Optional[str] = None,
        limit: int = 20,
        today: Optional[date] = None
    ) -> List[Item]:
        """
        Get tasks (and meetings, unless the type filter excludes them).

        Args:
            user_id: Requesting user id
            role: Requesting user role
            status: Only items with this status ("all" or None matches any)
            priority: Only items with this priority ("all" or None matches any)
            type: "meeting" or "all" (or None) also includes meetings
            limit: Maximum number of items returned
            today: Processing date (defaults to today)

        Returns:
            Sorted, filtered, truncated list of Items
        """
        if today is None:
            today = date.today()
        role = Role.parse(role)

        course_ids = self.get_course_ids(user_id, role)
        if not course_ids:
            return []

        calls = {"tasks": (self.source.fetch_tasks, (course_ids,))}
        include_meetings = type is None or type == MATCH_ALL or type == ItemType.MEETING.value
        if include_meetings:
            calls["meetings"] = (self.source.fetch_meetings, (course_ids,))
        fetched = self._fetch_all(calls)

        normalizer = ItemNormalizer(self.catalog, today)
        items = self._build_branch(fetched["tasks"], ItemType.TASK, normalizer, user_id, role).items
        if include_meetings:
            items += self._build_branch(
                fetched["meetings"], ItemType.MEETING, normalizer, user_id, role
            ).items

        filtered = [
            item for item in items
            if _matches(item.status, status) and _matches(item.priority, priority)
        ]
        return sort_items(filtered)[:max(0, limit)]

    def get_announcements(
        self,
        user_id: str,
        limit: int = 10,
        today: Optional[date] = None
    ) -> List[Item]:
        """Announcements for a user in fetch order, truncated to limit."""
        if today is None:
            today = date.today()

        records = self._fetch("announcements", self.source.fetch_announcements, user_id)
        normalizer = ItemNormalizer(self.catalog, today)
        items = self._build_branch(records, ItemType.ANNOUNCEMENT, normalizer, user_id, None).items
        return items[:max(0, limit)]

    def get_user_stats(self, user_id: str, role: Any, today: Optional[date] = None) -> DashboardStats:
        """Just the statistics portion of the dashboard."""
        return self.get_dashboard(user_id, role, today).stats

    def get_urgent_items(
        self,
        user_id: str,
        role: Any,
        today: Optional[date] = None
    ) -> List[Item]:
        """Urgent dashboard items, soonest due first."""
        dashboard = self.get_dashboard(user_id, role, today)
        urgent = [item for item in dashboard.items if item.priority == Priority.URGENT.value]
        return sort_by_due_date(urgent)

    def get_meeting_details(self, meeting_id: str, email: Optional[str] = None) -> Dict[str, Any]:
        """
        Raw meeting record, used by clients to join a meeting.

        The requester's email is passed through to the course service.

        Raises:
            NotFound: If the meeting does not exist
            UpstreamUnavailable: If the course service cannot be reached
        """
        try:
            meeting = self.source.fetch_meeting(meeting_id, email=email)
        except NotFound:
            raise
        except UpstreamUnavailable:
            raise
        except Exception as e:
            raise UpstreamUnavailable("meeting details", str(e)) from e

        if not meeting:
            raise NotFound("Meeting", meeting_id)
        return meeting
