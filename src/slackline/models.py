"""Data models for Slackline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class DependencyType(str, Enum):
    """Precedence relationship between two tasks."""

    FS = "FS"  # Finish-to-Start
    SS = "SS"  # Start-to-Start
    FF = "FF"  # Finish-to-Finish
    SF = "SF"  # Start-to-Finish


@dataclass(frozen=True)
class Dependency:
    """A typed precedence edge from predecessor to successor.

    The lag is a signed number of working days added to the constraint;
    a negative lag lets the successor overlap its predecessor.
    """

    predecessor_id: str
    successor_id: str
    type: DependencyType = DependencyType.FS
    lag: int = 0

    @property
    def key(self) -> tuple[str, str]:
        """The (predecessor, successor) pair identifying this edge."""
        return (self.predecessor_id, self.successor_id)

    def __str__(self) -> str:
        if self.lag == 0:
            return f"{self.predecessor_id} -{self.type.value}-> {self.successor_id}"
        return f"{self.predecessor_id} -{self.type.value}{self.lag:+d}-> {self.successor_id}"


def _default_str_list() -> list[str]:
    return []


def _default_dict() -> dict[str, Any]:
    return {}


@dataclass
class Task:
    """A unit of work to be scheduled.

    ``dependencies`` and ``predecessors`` are equivalent: both list the ids of
    tasks that must precede this one. The offset fields are written back by
    the scheduler and are never read by it.
    """

    id: str
    name: str = ""
    estimated_hours: float | None = None
    dependencies: list[str] = field(default_factory=_default_str_list)
    predecessors: list[str] = field(default_factory=_default_str_list)
    meta: dict[str, Any] = field(default_factory=_default_dict)

    # Computed by the scheduler
    early_start: int | None = None
    early_finish: int | None = None
    late_start: int | None = None
    late_finish: int | None = None
    critical_path: bool | None = None

    @property
    def effort_hours(self) -> float:
        """Effort estimate, treating a missing estimate as zero."""
        return self.estimated_hours or 0.0

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass
class Resource:
    """A person, crew or piece of equipment with finite daily capacity."""

    id: str
    name: str = ""
    availability: float = 8.0  # hours per working day
    cost: float | None = None  # per hour


@dataclass
class ResourceAssignment:
    """Links a resource to a task for a number of hours per working day.

    The date window is advisory; leveling rewrites it to match where the task
    was actually placed.
    """

    task_id: str
    resource_id: str
    hours_per_day: float
    start_date: date | None = None
    end_date: date | None = None


def _default_task_list() -> list[Task]:
    return []


def _default_dependency_list() -> list[Dependency]:
    return []


def _default_resource_list() -> list[Resource]:
    return []


def _default_assignment_list() -> list[ResourceAssignment]:
    return []


@dataclass
class Project:
    """Everything needed to schedule one project."""

    name: str = ""
    start_date: date | None = None
    tasks: list[Task] = field(default_factory=_default_task_list)
    dependencies: list[Dependency] = field(default_factory=_default_dependency_list)
    resources: list[Resource] = field(default_factory=_default_resource_list)
    assignments: list[ResourceAssignment] = field(default_factory=_default_assignment_list)

    def get_task_by_id(self, task_id: str) -> Task | None:
        """Get a task by its ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def all_dependencies(self) -> list[Dependency]:
        """Explicit edges plus the FS edges implied by the tasks' id lists.

        An explicit edge wins over an inferred one for the same pair.
        """
        explicit_keys = {dep.key for dep in self.dependencies}
        inferred = [
            dep for dep in extract_dependencies(self.tasks) if dep.key not in explicit_keys
        ]
        return [*self.dependencies, *inferred]


def extract_dependencies(tasks: list[Task]) -> list[Dependency]:
    """Derive FS, zero-lag edges from each task's ``dependencies`` and ``predecessors``.

    Each (predecessor, successor) pair appears once, however many times it is
    listed.
    """
    dependencies: list[Dependency] = []
    seen: set[tuple[str, str]] = set()

    for task in tasks:
        for pred_id in [*task.dependencies, *task.predecessors]:
            key = (pred_id, task.id)
            if key in seen:
                continue
            seen.add(key)
            dependencies.append(Dependency(predecessor_id=pred_id, successor_id=task.id))

    return dependencies
