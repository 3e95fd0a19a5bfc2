"""Core dataclasses for the scheduling system."""

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slackline.models import ResourceAssignment, Task


def _default_str_list() -> list[str]:
    return []


@dataclass
class ScheduledTask:
    """A task with its computed CPM timing.

    All offsets are working days from the project start; ``start_date`` and
    ``due_date`` are those offsets materialized on the business calendar.
    """

    task: "Task"
    early_start: int
    early_finish: int
    late_start: int
    late_finish: int
    total_float: float
    free_float: float
    is_critical: bool
    duration: int
    level: int
    start_date: date
    due_date: date

    @property
    def task_id(self) -> str:
        return self.task.id

    @property
    def name(self) -> str:
        return self.task.display_name


def _default_scheduled_list() -> list[ScheduledTask]:
    return []


@dataclass
class SchedulingResult:
    """Complete result of a scheduling run."""

    scheduled_tasks: list[ScheduledTask] = field(default_factory=_default_scheduled_list)
    project_start: date | None = None
    critical_path: list[str] = field(default_factory=_default_str_list)
    warnings: list[str] = field(default_factory=_default_str_list)

    def get(self, task_id: str) -> ScheduledTask | None:
        """Look up the scheduled entry for a task id."""
        for scheduled in self.scheduled_tasks:
            if scheduled.task_id == task_id:
                return scheduled
        return None


@dataclass
class ProjectStatistics:
    """Summary figures for a schedule."""

    project_duration: int
    project_end_date: date
    critical_task_count: int
    total_task_count: int
    critical_path_length: int  # Sum of the durations of critical tasks
    average_float: float
    tasks_with_float: int


@dataclass
class LevelingConflict:
    """A task that could not be placed within its float without overbooking."""

    task_id: str
    resource_ids: list[str]
    overloaded_days: list[int]  # Offsets where capacity is exceeded


def _default_conflict_list() -> list[LevelingConflict]:
    return []


def _default_assignment_list() -> "list[ResourceAssignment]":
    return []


def _default_int_dict() -> dict[str, int]:
    return {}


def _default_float_dict() -> dict[str, float]:
    return {}


@dataclass
class LevelingResult:
    """Outcome of a resource leveling pass."""

    scheduled_tasks: list[ScheduledTask]  # In processing order
    assignments: "list[ResourceAssignment]" = field(default_factory=_default_assignment_list)
    conflicts: list[LevelingConflict] = field(default_factory=_default_conflict_list)
    warnings: list[str] = field(default_factory=_default_str_list)
    peak_load: dict[str, float] = field(default_factory=_default_float_dict)
    resource_costs: dict[str, float] = field(default_factory=_default_float_dict)
    shifts: dict[str, int] = field(default_factory=_default_int_dict)  # task_id -> days moved


@dataclass
class RiskSummary:
    """Distribution of project duration across Monte Carlo trials."""

    p10: int
    p50: int
    p90: int
    mean: float
    std_dev: float
    iterations: int
    cancelled: bool = False
    warnings: list[str] = field(default_factory=_default_str_list)  # Dropped dependency edges
