"""
Normalization of raw EduSphere records into canonical dashboard items.

Upstream payloads are loosely typed: dates arrive as timestamps, plain dates
or garbage, optional fields come and go. Conversion is tolerant; anything
that cannot become an Item is reported as a dropped result rather than raised.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from coursedash.core.errors import ItemConversionDropped
from coursedash.core.models import Item, ItemType, Priority, RawRecord
from coursedash.dashboard.prioritizer import calculate_priority
from coursedash.dashboard.sources import CourseCatalog, UNKNOWN_COURSE

logger = logging.getLogger(__name__)

GENERAL_ANNOUNCEMENT = "General Announcement"
DEFAULT_MEETING_LOCATION = "Online Meeting"

_PLAIN_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def extract_date(value: Any, today: date) -> date:
    """
    Reduce an upstream date value to a calendar date.

    - Contains "T": parsed as a full timestamp, date component kept
    - Plain YYYY-MM-DD: parsed directly
    - Anything else, missing, or unparsable: today

    Args:
        value: Raw date value from the payload
        today: Processing date used as fallback

    Returns:
        Calendar date, never None
    """
    if value is None:
        return today

    date_str = str(value)
    try:
        if "T" in date_str:
            return date_parser.isoparse(date_str).date()
        elif _PLAIN_DATE.fullmatch(date_str):
            return date.fromisoformat(date_str)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Error parsing date {date_str!r}, using {today}: {e}")
    return today


@dataclass(frozen=True)
class NormalizeResult:
    """Outcome of converting one record: either an item or a drop reason."""
    item: Optional[Item] = None
    dropped: Optional[ItemConversionDropped] = None

    @property
    def ok(self) -> bool:
        return self.item is not None


class ItemNormalizer:
    """
    Converts raw task, meeting and announcement records into Items.

    One instance serves one request: the processing date is fixed at
    construction so every item in the request is classified against the
    same "today".
    """

    def __init__(self, catalog: CourseCatalog, today: date):
        self.catalog = catalog
        self.today = today
        self._converters = {
            ItemType.TASK: self._convert_task,
            ItemType.MEETING: self._convert_meeting,
            ItemType.ANNOUNCEMENT: self._convert_announcement,
        }

    def normalize(self, raw: Dict[str, Any], item_type: ItemType) -> Optional[Item]:
        """Convert a record, returning None when it has to be dropped."""
        return self.try_normalize(raw, item_type).item

    def try_normalize(self, raw: Dict[str, Any], item_type: ItemType) -> NormalizeResult:
        """Convert a record, reporting why it was dropped on failure."""
        record = RawRecord(raw)
        try:
            converter = self._converters[ItemType(item_type)]
            return NormalizeResult(item=converter(record))
        except ItemConversionDropped as e:
            logger.debug(str(e))
            return NormalizeResult(dropped=e)
        except Exception as e:
            type_name = str(getattr(item_type, "value", item_type))
            dropped = ItemConversionDropped(type_name, str(e), record.text("id"))
            logger.warning(f"Error converting {type_name} to dashboard item: {e}")
            return NormalizeResult(dropped=dropped)

    def _course_name(self, course_id: Optional[str]) -> str:
        """Resolve a course display name; failures never abort the item."""
        if course_id is None:
            return UNKNOWN_COURSE
        try:
            name = self.catalog.get_course_name(course_id)
        except Exception as e:
            logger.warning(f"Error getting course name for {course_id}: {e}")
            return UNKNOWN_COURSE
        return name or UNKNOWN_COURSE

    def _require_id(self, record: RawRecord, item_type: ItemType) -> str:
        record_id = record.text("id")
        if record_id is None:
            raise ItemConversionDropped(item_type.value, "record has no id")
        return record_id

    def _convert_task(self, record: RawRecord) -> Item:
        item_id = self._require_id(record, ItemType.TASK)
        due_date = extract_date(record.get("dueDate"), self.today)
        status = record.text("status", "pending")

        return Item(
            id=item_id,
            type=ItemType.TASK,
            name=record.text("title"),
            description=record.text("description"),
            due_date=due_date,
            course=self._course_name(record.text("courseId")),
            status=status,
            priority=calculate_priority(due_date, status, self.today).value,
            category=record.text("category"),
            max_points=record.number("maxPoints"),
            file_url=record.text("fileUrl"),
            file_name=record.text("fileName"),
        )

    def _convert_meeting(self, record: RawRecord) -> Item:
        item_id = self._require_id(record, ItemType.MEETING)
        due_date = extract_date(record.first_present("datetime", "scheduledAt"), self.today)
        status = record.text("status", "pending")

        return Item(
            id=item_id,
            type=ItemType.MEETING,
            name=record.text("title"),
            description=record.text("description"),
            due_date=due_date,
            course=self._course_name(record.text("courseId")),
            status=status,
            priority=calculate_priority(due_date, status, self.today).value,
            category="meeting",
            announcement_type=record.text("type"),
            location=record.text("location", DEFAULT_MEETING_LOCATION),
            is_important=status == "active",
            # Joining a meeting goes through its invitation link
            file_url=record.text("invitationLink"),
        )

    def _convert_announcement(self, record: RawRecord) -> Item:
        item_id = self._require_id(record, ItemType.ANNOUNCEMENT)
        due_date = extract_date(record.first_present("scheduledDate", "expiryDate"), self.today)
        status = record.text("status", "pending")
        # Announcements keep the upstream priority instead of a computed tier
        priority = record.text("priority", Priority.SAFE.value)

        target_course = record.text("targetCourseId")
        course = self._course_name(target_course) if target_course else GENERAL_ANNOUNCEMENT

        return Item(
            id=item_id,
            type=ItemType.ANNOUNCEMENT,
            name=record.text("title"),
            description=record.text("content"),
            due_date=due_date,
            course=course,
            status=status,
            priority=priority,
            category="announcement",
            announcement_type=record.text("targetAudienceType"),
            is_important=priority in ("high", "urgent") or status == "active",
        )
