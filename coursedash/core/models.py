"""
Data models for the course dashboard
Defines canonical items, stats, roles, and the tolerant raw-record wrapper
"""

from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class ItemType(str, Enum):
    """Kind of dashboard item"""
    TASK = "task"
    MEETING = "meeting"
    ANNOUNCEMENT = "announcement"


class Priority(str, Enum):
    """Urgency tier, declared from most to least urgent"""
    URGENT = "urgent"
    WARNING = "warning"
    SAFE = "safe"


class Role(Enum):
    """User role with its upstream numeric code"""
    ADMIN = "1100"
    LECTURER = "1200"
    STUDENT = "1300"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Optional['Role']:
        """
        Resolve a role from an upstream code ("1200") or a name ("lecturer").

        Returns None for anything unrecognized; callers treat that as a role
        with no visibility.
        """
        if isinstance(value, Role):
            return value
        if value is None:
            return None

        text = str(value).strip()
        for role in cls:
            if text == role.value or text.upper() == role.name:
                return role
        return None


class RawRecord:
    """
    Read-only view over an untyped upstream payload.

    Every accessor returns None when the key is missing or holds a value of
    the wrong shape, so converters never have to thread their own checks.
    """

    def __init__(self, data: Optional[Dict[str, Any]]):
        self._data = data if isinstance(data, dict) else {}

    def __contains__(self, key: str) -> bool:
        return self._data.get(key) is not None

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def text(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._data.get(key)
        if value is None:
            return default
        return str(value)

    def flag(self, key: str) -> bool:
        """True only for a real boolean True; "true" or 1 do not count."""
        return self._data.get(key) is True

    def number(self, key: str) -> Optional[int]:
        value = self._data.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return int(value)

    def strings(self, key: str) -> List[str]:
        value = self._data.get(key)
        if not isinstance(value, (list, tuple, set)):
            return []
        return [str(v) for v in value if v is not None]

    def first_present(self, *keys: str) -> Any:
        """Value of the first key that holds something other than None."""
        for key in keys:
            value = self._data.get(key)
            if value is not None:
                return value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


# Output names follow the camelCase keys the browser extension consumes
_ITEM_KEYS = {
    "due_date": "dueDate",
    "max_points": "maxPoints",
    "file_url": "fileUrl",
    "file_name": "fileName",
    "is_important": "isImportant",
    "announcement_type": "announcementType",
}


@dataclass(frozen=True)
class Item:
    """Canonical normalized task, meeting, or announcement"""
    id: str
    type: ItemType
    due_date: date
    course: str
    status: str = "pending"
    priority: str = Priority.SAFE.value
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    max_points: Optional[int] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    location: Optional[str] = None
    is_important: Optional[bool] = None
    announcement_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys; absent fields are left out."""
        result = {}
        for key, value in asdict(self).items():
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, date):
                value = value.isoformat()
            result[_ITEM_KEYS.get(key, key)] = value
        return result


@dataclass(frozen=True)
class DashboardStats:
    """Summary counters derived from one request's item list"""
    total: int = 0
    urgent: int = 0
    pending: int = 0
    completed: int = 0
    overdue: int = 0
    tasks: int = 0
    meetings: int = 0
    announcements: int = 0
    completion_rate: float = 0.0
    this_week_due: int = 0
    next_week_due: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalItems": self.total,
            "urgentItems": self.urgent,
            "pendingItems": self.pending,
            "completedItems": self.completed,
            "overdueItems": self.overdue,
            "tasksCount": self.tasks,
            "meetingsCount": self.meetings,
            "announcementsCount": self.announcements,
            "completionRate": self.completion_rate,
            "thisWeekDue": self.this_week_due,
            "nextWeekDue": self.next_week_due,
        }


@dataclass(frozen=True)
class DashboardData:
    """Complete result of one dashboard aggregation"""
    items: Tuple[Item, ...]
    stats: DashboardStats
    generated_on: date
    dropped: int = 0

    @classmethod
    def empty(cls, today: date) -> 'DashboardData':
        return cls(items=(), stats=DashboardStats(), generated_on=today)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class UserRecord:
    """User identity resolved at the request boundary"""
    user_id: str
    email: str
    role: Optional[Role]
    username: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserRecord':
        """Create UserRecord from database row dictionary"""
        return cls(
            user_id=str(data.get('id')),
            email=data.get('email', ''),
            role=Role.parse(data.get('role')),
            username=data.get('username'),
        )


def count_where(items: Iterable[Item], **conditions: Any) -> int:
    """Count items whose attributes equal all given values."""
    return sum(
        1 for item in items
        if all(getattr(item, name) == value for name, value in conditions.items())
    )
