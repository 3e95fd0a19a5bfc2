"""Tests for greedy resource leveling."""

from datetime import date

from slackline.models import Resource, ResourceAssignment, Task
from slackline.scheduler import (
    LevelingConfig,
    ResourceLedger,
    ResourceLeveler,
    ScheduledTask,
    SchedulingService,
    leveling_order,
)
from tests.conftest import tasks_by_hours


def _schedule(tasks: list[Task], project_start: date) -> list[ScheduledTask]:
    return SchedulingService().schedule(tasks, None, project_start).scheduled_tasks


def _dev(cost: float | None = None) -> list[Resource]:
    return [Resource(id="dev", name="Developer", availability=8, cost=cost)]


def _assign(*task_ids: str, hours: float = 8) -> list[ResourceAssignment]:
    return [ResourceAssignment(task_id=t, resource_id="dev", hours_per_day=hours) for t in task_ids]


class TestResourceLedger:
    """Test the per-resource booking ledger."""

    def test_fits_and_book(self) -> None:
        """Bookings accumulate per day up to capacity."""
        ledger = ResourceLedger(8, "dev")
        assert ledger.fits(0, 2, 6)
        assert ledger.book(0, 2, 6) == []
        assert not ledger.fits(1, 1, 4)
        assert ledger.fits(2, 1, 8)

    def test_overbooking_reports_days(self) -> None:
        """Booking past capacity returns the overloaded days."""
        ledger = ResourceLedger(8, "dev")
        ledger.book(0, 3, 8)
        assert ledger.book(1, 1, 1) == [1]
        assert ledger.peak() == 9
        assert ledger.total_hours() == 25

    def test_empty_ledger(self) -> None:
        """An unused resource has zero peak load."""
        assert ResourceLedger(8).peak() == 0.0


class TestLevelingOrder:
    """Test the processing order contract."""

    def test_least_float_first(self, project_start: date) -> None:
        """Tasks are processed by total float, then early start, then id."""
        tasks = [
            Task(id="long", estimated_hours=40),
            Task(id="b", estimated_hours=8),
            Task(id="a", estimated_hours=8),
            Task(id="after", estimated_hours=8, dependencies=["a"]),
        ]
        ordered = leveling_order(_schedule(tasks, project_start))

        assert [st.task_id for st in ordered] == ["long", "a", "after", "b"]


class TestResourceLeveler:
    """Test shifting tasks within float to respect capacity."""

    def test_shifts_task_within_float(self, project_start: date) -> None:
        """A clash is resolved by moving the task with more float."""
        tasks = tasks_by_hours(A=8, B=8, C=24)
        scheduled = _schedule(tasks, project_start)

        result = ResourceLeveler().level(scheduled, _dev(), _assign("A", "B"), project_start)
        leveled = {st.task_id: st for st in result.scheduled_tasks}

        assert leveled["A"].early_start == 0
        assert leveled["B"].early_start == 1
        assert leveled["B"].early_finish == 2
        assert leveled["B"].start_date == date(2025, 1, 7)
        assert leveled["B"].total_float == 1
        assert leveled["B"].free_float <= leveled["B"].total_float
        assert result.shifts == {"B": 1}
        assert result.conflicts == []
        assert result.peak_load == {"dev": 8}

    def test_input_not_mutated(self, project_start: date) -> None:
        """Leveling returns copies and leaves the schedule untouched."""
        scheduled = _schedule(tasks_by_hours(A=8, B=8, C=24), project_start)

        ResourceLeveler().level(scheduled, _dev(), _assign("A", "B"), project_start)

        assert [st.early_start for st in scheduled] == [0, 0, 0]

    def test_conflict_reported_when_no_slot_fits(self, project_start: date) -> None:
        """Two critical tasks on one resource cannot be levelled."""
        scheduled = _schedule(tasks_by_hours(A=24, B=24), project_start)

        result = ResourceLeveler().level(scheduled, _dev(), _assign("A", "B"), project_start)

        assert len(result.conflicts) == 1
        conflict = result.conflicts[0]
        assert conflict.task_id == "B"
        assert conflict.resource_ids == ["dev"]
        assert conflict.overloaded_days == [0, 1, 2]
        assert result.peak_load["dev"] == 16
        # The unplaceable task keeps its early schedule
        assert {st.task_id: st.early_start for st in result.scheduled_tasks} == {"A": 0, "B": 0}

    def test_max_shift_days_caps_search(self, project_start: date) -> None:
        """With no shift allowed, a clash becomes a conflict."""
        scheduled = _schedule(tasks_by_hours(A=8, B=8, C=24), project_start)
        leveler = ResourceLeveler(LevelingConfig(max_shift_days=0))

        result = leveler.level(scheduled, _dev(), _assign("A", "B"), project_start)

        assert result.shifts == {}
        assert [c.task_id for c in result.conflicts] == ["B"]

    def test_partial_loads_share_a_day(self, project_start: date) -> None:
        """Assignments below capacity can run side by side."""
        scheduled = _schedule(tasks_by_hours(A=8, B=8, C=24), project_start)

        result = ResourceLeveler().level(
            scheduled, _dev(), _assign("A", "B", hours=4), project_start
        )

        assert result.shifts == {}
        assert result.peak_load["dev"] == 8

    def test_unknown_resource_skipped_with_warning(self, project_start: date) -> None:
        """Assignments to resources outside the pool are reported and ignored."""
        scheduled = _schedule(tasks_by_hours(A=8), project_start)
        assignments = [ResourceAssignment(task_id="A", resource_id="ghost", hours_per_day=8)]

        result = ResourceLeveler().level(scheduled, _dev(), assignments, project_start)

        assert result.conflicts == []
        assert any("ghost" in warning for warning in result.warnings)

    def test_unknown_task_skipped_with_warning(self, project_start: date) -> None:
        """Assignments for tasks outside the schedule are reported and ignored."""
        scheduled = _schedule(tasks_by_hours(A=8), project_start)

        result = ResourceLeveler().level(scheduled, _dev(), _assign("nope"), project_start)

        assert any("nope" in warning for warning in result.warnings)

    def test_assignments_follow_shifted_dates(self, project_start: date) -> None:
        """Assignment windows are rewritten to where each task landed."""
        scheduled = _schedule(tasks_by_hours(A=8, B=8, C=24), project_start)

        result = ResourceLeveler().level(scheduled, _dev(), _assign("A", "B"), project_start)
        windows = {a.task_id: (a.start_date, a.end_date) for a in result.assignments}

        assert windows["A"] == (date(2025, 1, 6), date(2025, 1, 7))
        assert windows["B"] == (date(2025, 1, 7), date(2025, 1, 8))

    def test_resource_costs(self, project_start: date) -> None:
        """Cost is booked hours times the hourly rate."""
        scheduled = _schedule(tasks_by_hours(A=8, B=16, C=24), project_start)

        result = ResourceLeveler().level(
            scheduled, _dev(cost=100), _assign("A", "B"), project_start
        )

        assert result.resource_costs == {"dev": 2400}

    def test_disabled_returns_schedule_unchanged(self, project_start: date) -> None:
        """A disabled leveler only reorders."""
        scheduled = _schedule(tasks_by_hours(A=24, B=24), project_start)
        leveler = ResourceLeveler(LevelingConfig(enabled=False))

        result = leveler.level(scheduled, _dev(), _assign("A", "B"), project_start)

        assert [st.early_start for st in result.scheduled_tasks] == [0, 0]
        assert result.conflicts == []
