"""
Task model for TodoPro.

Tasks are the to-do items owned by a single user.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, List
from uuid import uuid4

# Valid status values
TASK_STATUSES = ("Pending", "In Progress", "Completed")

# Valid priority values, lowest first
TASK_PRIORITIES = ("Low", "Medium", "High", "Critical")

PRIORITY_RANK = {"Critical": 4, "High": 3, "Medium": 2, "Low": 1}

# Bit positions in Task.flags
FLAG_STARRED = 1
FLAG_ARCHIVED = 2
FLAG_BITS = 32

DEFAULT_DUE_DAYS = 7

_DATETIME_FIELDS = ("due_date", "created_at", "updated_at")
_LIST_FIELDS = ("tags", "dependencies")


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value) -> Optional[datetime]:
    """Parse an ISO string or datetime into a naive UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass
class Task:
    """
    A to-do item.

    Attributes:
        title: Task title
        user_id: Owning user
        id: Unique identifier (UUID)
        description: Longer description
        status: Pending, In Progress or Completed
        priority: Low, Medium, High or Critical
        tags: Ordered list of tags
        due_date: When the task is due (defaults to a week after creation)
        category: Free-form category
        estimated_time: Estimated minutes
        actual_time: Minutes actually spent
        flags: 32-bit integer of independent boolean toggles
        dependencies: Ids of tasks this one depends on
        created_at: When the task was created
        updated_at: When last modified
    """

    title: str
    user_id: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid4()))
    description: str = ""
    status: str = "Pending"
    priority: str = "Medium"
    tags: List[str] = field(default_factory=list)
    due_date: Optional[datetime] = None
    category: str = "General"
    estimated_time: int = 60
    actual_time: int = 0
    flags: int = 0
    dependencies: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = utcnow()
        if self.updated_at is None:
            self.updated_at = self.created_at
        if self.due_date is None:
            self.due_date = self.created_at + timedelta(days=DEFAULT_DUE_DAYS)

    @property
    def priority_rank(self) -> int:
        """Numeric rank of the priority; unknown values rank as Medium."""
        return PRIORITY_RANK.get(self.priority, 2)

    @property
    def is_completed(self) -> bool:
        return self.status == "Completed"

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Due date has passed and the task is not completed."""
        now = now or utcnow()
        return self.due_date is not None and self.due_date < now and not self.is_completed

    def to_dict(self) -> dict:
        """Convert to dictionary for storage/serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "tags": list(self.tags),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "category": self.category,
            "estimated_time": self.estimated_time,
            "actual_time": self.actual_time,
            "flags": self.flags,
            "dependencies": list(self.dependencies),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from dictionary (e.g., database row)."""
        data = dict(data)
        for field_name in _DATETIME_FIELDS:
            data[field_name] = parse_datetime(data.get(field_name))

        # Lists are JSON strings in SQLite
        for field_name in _LIST_FIELDS:
            if isinstance(data.get(field_name), str):
                data[field_name] = json.loads(data[field_name])

        return cls(
            id=data.get("id"),
            user_id=data.get("user_id"),
            title=data.get("title", ""),
            description=data.get("description") or "",
            status=data.get("status", "Pending"),
            priority=data.get("priority", "Medium"),
            tags=list(data.get("tags") or []),
            due_date=data.get("due_date"),
            category=data.get("category") or "General",
            estimated_time=data.get("estimated_time", 60),
            actual_time=data.get("actual_time", 0),
            flags=data.get("flags", 0),
            dependencies=list(data.get("dependencies") or []),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


def compare_priority(a: Task, b: Task) -> int:
    """Higher priority first."""
    return b.priority_rank - a.priority_rank


def compare_due_date(a: Task, b: Task) -> int:
    """Earlier due date first; tasks without one sort last."""
    a_due = a.due_date or datetime.max
    b_due = b.due_date or datetime.max
    return (a_due > b_due) - (a_due < b_due)


def compare_importance(a: Task, b: Task) -> int:
    """Higher priority first, then earlier due date."""
    return compare_priority(a, b) or compare_due_date(a, b)
