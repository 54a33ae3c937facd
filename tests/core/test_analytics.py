"""
Tests for the productivity report.
"""

from datetime import datetime

from todopro.models.task import Task
from todopro.services.analytics import productivity_report, round_half_up

NOW = datetime(2024, 6, 1)


def make_task(**kwargs):
    kwargs.setdefault("title", "t")
    kwargs.setdefault("due_date", datetime(2024, 7, 1))
    return Task(**kwargs)


class TestProductivityReport:
    """Tests for productivity_report()."""

    def test_no_tasks(self):
        report = productivity_report([], now=NOW)

        assert report["avg"] == 0
        assert report["trend"] == [0] * 7
        assert report["total_tasks"] == 0

    def test_status_counts_and_overdue(self):
        tasks = [
            make_task(status="Pending", due_date=datetime(2024, 5, 1)),
            make_task(status="In Progress"),
            make_task(status="Completed", due_date=datetime(2024, 5, 1)),
        ]

        report = productivity_report(tasks, now=NOW)

        assert report["total_tasks"] == 3
        assert report["pending_tasks"] == 1
        assert report["in_progress_tasks"] == 1
        assert report["completed_tasks"] == 1
        assert report["overdue_tasks"] == 1

    def test_completion_times_drive_trend(self):
        tasks = [
            make_task(status="Completed", actual_time=minutes)
            for minutes in (10, 20, 30, 40, 50, 60, 70, 80, 90)
        ]

        report = productivity_report(tasks, now=NOW)

        assert report["trend"] == [30, 40, 50, 60, 70, 80, 90]
        assert report["avg"] == 50

    def test_single_completion_is_spread(self):
        report = productivity_report([make_task(status="Completed", actual_time=100)], now=NOW)

        assert report["trend"] == [80, 90, 100, 110, 95]
        assert report["avg"] == 100

    def test_falls_back_to_estimates(self):
        tasks = [make_task(estimated_time=30), make_task(estimated_time=45)]

        report = productivity_report(tasks, now=NOW)

        assert report["trend"] == [30, 45]
        assert report["avg"] == 38

    def test_sample_trend_without_timing_data(self):
        report = productivity_report([make_task(estimated_time=0)], now=NOW)

        assert report["trend"] == [60, 90, 75, 120, 80, 100, 95]
        assert report["avg"] == 88


def test_round_half_up():
    assert round_half_up(37.5) == 38
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
