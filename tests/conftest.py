"""Pytest configuration and fixtures for slackline tests."""

from __future__ import annotations

from datetime import date

import pytest

from slackline.logger import reset_logger
from slackline.models import Dependency, DependencyType, Task

# A Monday, so the first few offsets map to consecutive calendar days
PROJECT_START = date(2025, 1, 6)


@pytest.fixture(autouse=True)
def clean_logger() -> None:
    """Reset the slackline logger before each test for isolation."""
    reset_logger()


@pytest.fixture
def project_start() -> date:
    """Default project start date."""
    return PROJECT_START


@pytest.fixture
def chain_tasks() -> list[Task]:
    """Three tasks A(8h) -> B(16h) -> C(8h)."""
    return [
        Task(id="A", name="Task A", estimated_hours=8),
        Task(id="B", name="Task B", estimated_hours=16, dependencies=["A"]),
        Task(id="C", name="Task C", estimated_hours=8, dependencies=["B"]),
    ]


@pytest.fixture
def chain_with_parallel(chain_tasks: list[Task]) -> list[Task]:
    """The A -> B -> C chain plus an independent one-day task D."""
    return [*chain_tasks, Task(id="D", name="Task D", estimated_hours=8)]


def fs(*pairs: tuple[str, str]) -> list[Dependency]:
    """Create FS, zero-lag dependencies from (predecessor, successor) pairs.

    Example:
        fs(("A", "B"), ("B", "C"))
    """
    return [Dependency(predecessor_id=p, successor_id=s) for p, s in pairs]


def edge(
    predecessor: str, successor: str, type: DependencyType = DependencyType.FS, lag: int = 0
) -> Dependency:
    """Create a single typed dependency."""
    return Dependency(predecessor_id=predecessor, successor_id=successor, type=type, lag=lag)


def tasks_by_hours(**hours: float) -> list[Task]:
    """Create independent tasks from keyword ``id=hours`` pairs."""
    return [Task(id=task_id, estimated_hours=h) for task_id, h in hours.items()]
