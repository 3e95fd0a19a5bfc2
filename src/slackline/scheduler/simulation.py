"""Monte Carlo schedule risk analysis."""

import math
import random
import statistics
from collections.abc import Callable
from concurrent.futures import Executor
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING

from slackline.exceptions import SimulationCancelledError
from slackline.logger import get_logger
from slackline.models import extract_dependencies

from .config import SchedulingConfig, SimulationConfig
from .core import RiskSummary
from .network import NetworkBuilder
from .service import SchedulingService

if TYPE_CHECKING:
    from slackline.models import Dependency, Task

logger = get_logger()

PROGRESS_INTERVAL = 100  # Log progress every N trials


def nearest_rank(sorted_values: list[int], quantile: float) -> int:
    """Value at index ``floor(n * quantile)`` of an ascending list."""
    index = min(math.floor(len(sorted_values) * quantile), len(sorted_values) - 1)
    return sorted_values[index]


def summarize_durations(durations: list[int], *, cancelled: bool = False) -> RiskSummary:
    """Percentiles, mean and population standard deviation of trial durations."""
    ordered = sorted(durations)
    return RiskSummary(
        p10=nearest_rank(ordered, 0.1),
        p50=nearest_rank(ordered, 0.5),
        p90=nearest_rank(ordered, 0.9),
        mean=statistics.fmean(ordered),
        std_dev=statistics.pstdev(ordered),
        iterations=len(ordered),
        cancelled=cancelled,
    )


class RiskSimulator:
    """Runs the scheduling pipeline repeatedly with perturbed effort estimates.

    Every trial gets its own ``random.Random`` seeded from the master
    generator, so a trial depends only on its seed and the unperturbed
    inputs. That makes runs reproducible and lets trials be farmed out to an
    executor without sharing a random source.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        scheduling_config: SchedulingConfig | None = None,
    ):
        self.config = config or SimulationConfig()
        self.service = SchedulingService(scheduling_config)

    def run_trial(
        self,
        tasks: "list[Task]",
        dependencies: "list[Dependency]",
        project_start: date,
        seed: int,
    ) -> int:
        """Schedule one perturbed copy of the tasks and return its duration in days."""
        rng = random.Random(seed)
        varied = [
            replace(
                task,
                estimated_hours=task.effort_hours * rng.uniform(self.config.low, self.config.high),
            )
            for task in tasks
        ]
        result = self.service.schedule(varied, dependencies, project_start)
        stats = self.service.get_project_statistics(result.scheduled_tasks, project_start)
        return stats.project_duration

    def simulate(  # noqa: PLR0913 - keyword-only knobs for reproducibility and control
        self,
        tasks: "list[Task]",
        dependencies: "list[Dependency] | None",
        project_start: date,
        iterations: int | None = None,
        *,
        rng: random.Random | None = None,
        executor: Executor | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> RiskSummary:
        """Estimate the distribution of project duration.

        Args:
            tasks: Tasks with unperturbed estimates (never mutated)
            dependencies: Typed edges, or None to derive them from the tasks
            project_start: Calendar date of offset 0
            iterations: Number of trials (defaults to config)
            rng: Master random source (defaults to one seeded from config)
            executor: Optional executor to run trials in parallel
            should_cancel: Polled between trials; returning True stops the run

        Returns:
            RiskSummary over the completed trials

        Raises:
            ValueError: If iterations is less than 1
            SimulationCancelledError: If cancelled before any trial completed
        """
        iterations = self.config.iterations if iterations is None else iterations
        if iterations < 1:
            raise ValueError(f"iterations must be at least 1, got {iterations}")

        master = rng or random.Random(self.config.seed)
        seeds = [master.getrandbits(64) for _ in range(iterations)]

        if dependencies is None:
            dependencies = extract_dependencies(tasks)
        dependencies, warnings = self._resolve_edges(tasks, dependencies)

        if executor is not None:
            futures = [
                executor.submit(self.run_trial, tasks, dependencies, project_start, seed)
                for seed in seeds
            ]
            durations: list[int] = []
            for future in futures:
                if should_cancel is not None and should_cancel():
                    for pending in futures:
                        pending.cancel()
                    return self._finish(durations, warnings, cancelled=True)
                durations.append(future.result())
            return self._finish(durations, warnings)

        durations = []
        for i, seed in enumerate(seeds):
            if should_cancel is not None and should_cancel():
                return self._finish(durations, warnings, cancelled=True)
            durations.append(self.run_trial(tasks, dependencies, project_start, seed))
            if (i + 1) % PROGRESS_INTERVAL == 0:
                logger.checks(f"Simulation: {i + 1}/{iterations} trials complete")

        return self._finish(durations, warnings)

    def _resolve_edges(
        self, tasks: "list[Task]", dependencies: "list[Dependency]"
    ) -> "tuple[list[Dependency], list[str]]":
        """Validate the unperturbed network once and keep only edges that can be wired.

        Trials then never meet an unknown reference, so the missing-reference
        policy is applied and logged once per run.
        """
        network = NetworkBuilder(self.service.config).build(tasks, dependencies)
        wired = [
            dep
            for dep in dependencies
            if dep.predecessor_id in network.index and dep.successor_id in network.index
        ]
        return wired, network.warnings

    def _finish(
        self, durations: list[int], warnings: list[str], *, cancelled: bool = False
    ) -> RiskSummary:
        if not durations:
            raise SimulationCancelledError("Simulation cancelled before any trial completed")
        if cancelled:
            logger.warning(f"Simulation cancelled after {len(durations)} trials")
        summary = summarize_durations(durations, cancelled=cancelled)
        summary.warnings = warnings
        logger.checks(
            f"Simulation: P10={summary.p10} P50={summary.p50} P90={summary.p90} "
            f"mean={summary.mean:.2f} sd={summary.std_dev:.2f}"
        )
        return summary


def monte_carlo_simulation(
    tasks: "list[Task]",
    dependencies: "list[Dependency] | None",
    project_start: date,
    iterations: int = 1000,
    seed: int | None = None,
) -> RiskSummary:
    """Functional entry point: run ``iterations`` trials with U(0.8, 1.2) effort noise."""
    return RiskSimulator(SimulationConfig(iterations=iterations, seed=seed)).simulate(
        tasks, dependencies, project_start
    )
