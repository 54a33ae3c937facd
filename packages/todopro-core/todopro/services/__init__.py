"""
Business logic services for TodoPro.
"""

from todopro.services.index import TaskIndex
from todopro.services.tasks import TaskStore

__all__ = [
    "TaskIndex",
    "TaskStore",
]
