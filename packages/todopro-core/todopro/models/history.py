"""
Records kept by the task index about mutations.

Command records feed the undo stack, activity records the task history,
and notifications the outgoing notification queue.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from todopro.models.task import Task, utcnow

# Valid command actions
COMMAND_ACTIONS = ("CREATE", "UPDATE", "DELETE")

# Valid activity actions
ACTIVITY_ACTIONS = ("created", "updated", "deleted")


@dataclass
class CommandRecord:
    """
    One entry on the command history stack.

    Attributes:
        action: CREATE, UPDATE or DELETE
        task_id: Task the command applied to
        data: Creation payload, requested update fields,
              or the full Task as it was before deletion
    """

    action: str
    task_id: str
    data: Any = None

    def to_dict(self) -> dict:
        data = self.data.to_dict() if isinstance(self.data, Task) else self.data
        return {"action": self.action, "task_id": self.task_id, "data": data}


@dataclass
class ActivityRecord:
    """A single entry in the task activity history."""

    task_id: str
    action: str
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = utcnow()

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "action": self.action,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class Notification:
    """A pending notification about a task."""

    task_id: str
    message: str
    type: str = "info"
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "task_id": self.task_id,
            "message": self.message,
            "type": self.type,
            "created_at": self.created_at.isoformat(),
        }
