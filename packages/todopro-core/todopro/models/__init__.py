"""
Core data models for TodoPro.
"""

from todopro.models.history import ActivityRecord, CommandRecord, Notification
from todopro.models.task import Task

__all__ = [
    "Task",
    "CommandRecord",
    "ActivityRecord",
    "Notification",
]
