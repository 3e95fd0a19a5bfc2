"""High-level scheduling service."""

from datetime import date
from typing import TYPE_CHECKING

from slackline.logger import get_logger
from slackline.models import extract_dependencies

from .analysis import CriticalPathAnalyzer
from .calendar import add_working_days
from .config import SchedulingConfig
from .core import ProjectStatistics, ScheduledTask, SchedulingResult
from .network import NetworkBuilder
from .passes import BackwardPassEngine, ForwardPassEngine

if TYPE_CHECKING:
    from slackline.models import Dependency, Task

logger = get_logger()


class SchedulingService:
    """Runs the critical-path pipeline on a batch of tasks.

    This service coordinates:
    - NetworkBuilder (tasks + edges -> node arena)
    - ForwardPassEngine / BackwardPassEngine (early and late times)
    - CriticalPathAnalyzer (float, criticality, level)
    - the business calendar (offsets -> dates)

    The service keeps no state between calls; every call builds its own
    network, so one instance can be shared freely.
    """

    def __init__(self, config: SchedulingConfig | None = None):
        self.config = config or SchedulingConfig()

    def schedule(
        self,
        tasks: "list[Task]",
        dependencies: "list[Dependency] | None",
        project_start: date,
    ) -> SchedulingResult:
        """Schedule tasks from ``project_start``.

        Args:
            tasks: Tasks to schedule; computed offsets are written back onto them
            dependencies: Typed edges, or None to derive FS edges from each
                task's ``dependencies``/``predecessors`` lists
            project_start: Calendar date of offset 0

        Returns:
            SchedulingResult with one ScheduledTask per input task, in input order

        Raises:
            CycleDetectedError: If the dependency graph is not acyclic
            MissingReferenceError: If an edge names an unknown task and the
                configured policy is ``error``
            ValidationError: On duplicate ids, negative effort or conflicting edges
        """
        if dependencies is None:
            dependencies = extract_dependencies(tasks)

        network = NetworkBuilder(self.config).build(tasks, dependencies)
        if not network.nodes:
            return SchedulingResult(project_start=project_start, warnings=network.warnings)

        order = ForwardPassEngine().run(network)
        project_finish = max(node.early_finish for node in network.nodes)
        logger.checks(f"Forward pass complete: project finish at day {project_finish}")

        BackwardPassEngine().run(network, project_finish)

        analyzer = CriticalPathAnalyzer(self.config.critical_float_epsilon)
        analysis = analyzer.analyze(network, order)
        critical_path = analyzer.critical_path(network, order, analysis)

        scheduled_tasks: list[ScheduledTask] = []
        for node, result in zip(network.nodes, analysis, strict=True):
            task = node.task
            task.early_start = node.early_start
            task.early_finish = node.early_finish
            task.late_start = node.late_start
            task.late_finish = node.late_finish
            task.critical_path = result.is_critical

            scheduled_tasks.append(
                ScheduledTask(
                    task=task,
                    early_start=node.early_start,
                    early_finish=node.early_finish,
                    late_start=node.late_start,
                    late_finish=node.late_finish,
                    total_float=result.total_float,
                    free_float=result.free_float,
                    is_critical=result.is_critical,
                    duration=node.duration,
                    level=result.level,
                    start_date=add_working_days(project_start, node.early_start),
                    due_date=add_working_days(project_start, node.early_finish),
                )
            )

        logger.checks(
            f"Scheduled {len(scheduled_tasks)} tasks, "
            f"{sum(1 for st in scheduled_tasks if st.is_critical)} critical"
        )
        return SchedulingResult(
            scheduled_tasks=scheduled_tasks,
            project_start=project_start,
            critical_path=critical_path,
            warnings=network.warnings,
        )

    def get_project_statistics(
        self, scheduled_tasks: list[ScheduledTask], project_start: date
    ) -> ProjectStatistics:
        """Summarize a schedule.

        An empty schedule yields zero duration and zero average float.
        """
        if not scheduled_tasks:
            return ProjectStatistics(
                project_duration=0,
                project_end_date=project_start,
                critical_task_count=0,
                total_task_count=0,
                critical_path_length=0,
                average_float=0.0,
                tasks_with_float=0,
            )

        critical_tasks = [st for st in scheduled_tasks if st.is_critical]
        project_duration = max(st.early_finish for st in scheduled_tasks)

        return ProjectStatistics(
            project_duration=project_duration,
            project_end_date=add_working_days(project_start, project_duration),
            critical_task_count=len(critical_tasks),
            total_task_count=len(scheduled_tasks),
            critical_path_length=sum(st.duration for st in critical_tasks),
            average_float=sum(st.total_float for st in scheduled_tasks) / len(scheduled_tasks),
            tasks_with_float=sum(
                1 for st in scheduled_tasks if st.total_float > self.config.critical_float_epsilon
            ),
        )


def schedule_tasks(
    tasks: "list[Task]",
    dependencies: "list[Dependency] | None",
    project_start: date,
    config: SchedulingConfig | None = None,
) -> list[ScheduledTask]:
    """Functional shortcut for ``SchedulingService(config).schedule(...)``."""
    return SchedulingService(config).schedule(tasks, dependencies, project_start).scheduled_tasks
