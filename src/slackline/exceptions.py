"""Custom exceptions for Slackline."""

from __future__ import annotations

from collections.abc import Iterable


class SlacklineError(Exception):
    """Base exception for all Slackline errors."""

    pass


class ValidationError(SlacklineError):
    """Raised when scheduling input fails validation."""

    pass


class CycleDetectedError(ValidationError):
    """Raised when the dependency graph contains a cycle.

    The offending tasks are the ones a traversal could never finalize because
    one of their neighbours was still waiting on them.
    """

    def __init__(self, task_ids: Iterable[str]):
        self.task_ids = sorted(task_ids)
        super().__init__(
            f"Circular dependency detected among tasks: {', '.join(self.task_ids)}"
        )


class MissingReferenceError(ValidationError):
    """Raised when a dependency names a task that is not in the batch."""

    def __init__(self, predecessor_id: str, successor_id: str, missing_id: str):
        self.predecessor_id = predecessor_id
        self.successor_id = successor_id
        self.missing_id = missing_id
        super().__init__(
            f"Dependency {predecessor_id} -> {successor_id} references unknown task '{missing_id}'"
        )


class ParseError(SlacklineError):
    """Raised when YAML parsing fails."""

    pass


class SimulationCancelledError(SlacklineError):
    """Raised when a simulation is cancelled before any trial completed."""

    pass
