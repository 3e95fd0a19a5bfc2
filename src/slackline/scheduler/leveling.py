"""Greedy resource leveling within total float."""

from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING

from slackline.logger import get_logger
from slackline.models import ResourceAssignment

from .calendar import add_working_days
from .config import LevelingConfig, SchedulingConfig
from .core import LevelingConflict, LevelingResult, ScheduledTask
from .resources import ResourceLedger

if TYPE_CHECKING:
    from slackline.models import Resource

logger = get_logger()


def leveling_order(scheduled_tasks: list[ScheduledTask]) -> list[ScheduledTask]:
    """Order in which tasks claim resources: least total float first.

    Ties are broken by early start, then task id. Critical tasks therefore
    book capacity before anything that could move.
    """
    return sorted(scheduled_tasks, key=lambda st: (st.total_float, st.early_start, st.task_id))


class ResourceLeveler:
    """Shifts tasks inside their float window to respect daily resource capacity.

    This is a greedy heuristic, not an optimizer: each task takes the first
    start day in ``[early_start, late_start]`` at which every one of its
    assignments fits, with no backtracking, so processing order affects the
    outcome. A task that fits nowhere keeps its early schedule, its load is
    booked anyway and the overload is reported as a LevelingConflict.
    Dependency constraints are not re-propagated after a shift.
    """

    def __init__(
        self,
        config: LevelingConfig | None = None,
        scheduling_config: SchedulingConfig | None = None,
    ):
        self.config = config or LevelingConfig()
        self.scheduling_config = scheduling_config or SchedulingConfig()

    def level(
        self,
        scheduled_tasks: list[ScheduledTask],
        resources: "list[Resource]",
        assignments: list[ResourceAssignment],
        project_start: date,
    ) -> LevelingResult:
        """Level a schedule against resource capacity.

        Args:
            scheduled_tasks: Output of SchedulingService.schedule (not mutated)
            resources: Resource pool with daily availability in hours
            assignments: Task-resource links with hours per day
            project_start: Calendar date of offset 0, for rematerializing dates

        Returns:
            LevelingResult with shifted copies in processing order
        """
        ordered = leveling_order(scheduled_tasks)
        if not self.config.enabled:
            return LevelingResult(scheduled_tasks=[replace(st) for st in ordered])

        ledgers = {r.id: ResourceLedger(r.availability, r.id) for r in resources}
        known_tasks = {st.task_id for st in scheduled_tasks}
        warnings: list[str] = []

        by_task: dict[str, list[ResourceAssignment]] = {}
        for assignment in assignments:
            if assignment.task_id not in known_tasks:
                warnings.append(
                    f"Skipped assignment of {assignment.resource_id}: "
                    f"unknown task '{assignment.task_id}'"
                )
            elif assignment.resource_id not in ledgers:
                warnings.append(
                    f"Skipped assignment to {assignment.task_id}: "
                    f"unknown resource '{assignment.resource_id}'"
                )
            else:
                by_task.setdefault(assignment.task_id, []).append(assignment)
        for warning in warnings:
            logger.warning(warning)

        leveled: list[ScheduledTask] = []
        conflicts: list[LevelingConflict] = []
        shifts: dict[str, int] = {}
        placed: dict[str, ScheduledTask] = {}

        for st in ordered:
            task_assignments = by_task.get(st.task_id, [])
            if not task_assignments:
                placed[st.task_id] = replace(st)
                leveled.append(placed[st.task_id])
                continue

            start = self._find_start(st, task_assignments, ledgers)
            if start is None:
                start = st.early_start
                overloaded = self._commit(st, start, task_assignments, ledgers)
                conflict = LevelingConflict(
                    task_id=st.task_id,
                    resource_ids=sorted({a.resource_id for a in task_assignments}),
                    overloaded_days=overloaded,
                )
                conflicts.append(conflict)
                logger.warning(
                    f"Cannot level {st.task_id} within its float; "
                    f"{', '.join(conflict.resource_ids)} over capacity on days {overloaded}"
                )
            else:
                self._commit(st, start, task_assignments, ledgers)

            shifted = self._shift(st, start, project_start)
            if shifted.early_start != st.early_start:
                shifts[st.task_id] = shifted.early_start - st.early_start
                logger.changes(
                    f"Shifted {st.task_id} by {shifts[st.task_id]} day(s) "
                    f"to start {shifted.start_date}"
                )
            placed[st.task_id] = shifted
            leveled.append(shifted)

        return LevelingResult(
            scheduled_tasks=leveled,
            assignments=self._adjust_assignments(assignments, placed),
            conflicts=conflicts,
            warnings=warnings,
            peak_load={rid: ledger.peak() for rid, ledger in ledgers.items()},
            resource_costs=self._resource_costs(resources, ledgers),
            shifts=shifts,
        )

    def _candidate_days(self, st: ScheduledTask) -> range:
        last = st.late_start
        if self.config.max_shift_days is not None:
            last = min(last, st.early_start + self.config.max_shift_days)
        return range(st.early_start, last + 1)

    def _find_start(
        self,
        st: ScheduledTask,
        task_assignments: list[ResourceAssignment],
        ledgers: dict[str, ResourceLedger],
    ) -> int | None:
        """First candidate day at which every assignment fits, or None."""
        for day in self._candidate_days(st):
            if all(
                ledgers[a.resource_id].fits(day, st.duration, a.hours_per_day)
                for a in task_assignments
            ):
                return day
        return None

    def _commit(
        self,
        st: ScheduledTask,
        start: int,
        task_assignments: list[ResourceAssignment],
        ledgers: dict[str, ResourceLedger],
    ) -> list[int]:
        overloaded: set[int] = set()
        for a in task_assignments:
            overloaded.update(ledgers[a.resource_id].book(start, st.duration, a.hours_per_day))
        return sorted(overloaded)

    def _shift(self, st: ScheduledTask, start: int, project_start: date) -> ScheduledTask:
        """Copy of ``st`` moved to ``start``, with float and dates recomputed."""
        delta = start - st.early_start
        if delta == 0:
            return replace(st)

        total_float = float(st.late_start - start)
        return replace(
            st,
            early_start=start,
            early_finish=start + st.duration,
            total_float=total_float,
            free_float=min(st.free_float - delta, total_float),
            is_critical=abs(total_float) < self.scheduling_config.critical_float_epsilon,
            start_date=add_working_days(project_start, start),
            due_date=add_working_days(project_start, start + st.duration),
        )

    def _adjust_assignments(
        self,
        assignments: list[ResourceAssignment],
        placed: dict[str, ScheduledTask],
    ) -> list[ResourceAssignment]:
        adjusted: list[ResourceAssignment] = []
        for a in assignments:
            st = placed.get(a.task_id)
            if st is None:
                adjusted.append(replace(a))
            else:
                adjusted.append(replace(a, start_date=st.start_date, end_date=st.due_date))
        return adjusted

    def _resource_costs(
        self, resources: "list[Resource]", ledgers: dict[str, ResourceLedger]
    ) -> dict[str, float]:
        return {
            r.id: ledgers[r.id].total_hours() * r.cost for r in resources if r.cost is not None
        }
