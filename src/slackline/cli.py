"""Command-line interface for Slackline."""

from __future__ import annotations

import csv
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from .exceptions import SlacklineError
from .gantt import GanttRenderer
from .loader import load_project
from .logger import setup_logger
from .models import Project
from .scheduler import (
    LevelingResult,
    ResourceLeveler,
    RiskSimulator,
    ScheduledTask,
    SchedulingResult,
    SchedulingService,
)
from .unified_config import UnifiedConfig

app = typer.Typer(
    name="slackline",
    help="Slackline - critical path scheduling with resource leveling and risk simulation",
    add_completion=False,
)


class SortKey(str, Enum):
    """Orderings for the schedule table."""

    START = "start"
    LEVEL = "level"
    FLOAT = "float"
    ID = "id"


_SORT_KEYS = {
    SortKey.START: lambda st: (st.early_start, st.task_id),
    SortKey.LEVEL: lambda st: (st.level, st.early_start, st.task_id),
    SortKey.FLOAT: lambda st: (st.total_float, st.early_start, st.task_id),
    SortKey.ID: lambda st: st.task_id,
}

FileArgument = Annotated[Path, typer.Argument(help="Path to the project YAML file")]
StartDateOption = Annotated[
    str | None,
    typer.Option(
        "--start-date",
        "-s",
        help="Project start date (YYYY-MM-DD). Defaults to metadata.start_date, then today",
    ),
]


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to unified config file (default: slackline_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for slackline commands."""
    setup_logger(verbose)
    ctx.obj = {"config_path": config}


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    """Parse a date string from CLI option.

    Args:
        date_str: Date string in YYYY-MM-DD format or None
        option_name: Name of the option for error messages

    Returns:
        Parsed date object or None if date_str is None
    """
    if date_str is None:
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        raise _fail(
            f"Invalid {option_name} '{date_str}'. Use YYYY-MM-DD format."
        ) from None


def _load(ctx: typer.Context, file: Path) -> tuple[Project, UnifiedConfig]:
    """Load the project and its config, exiting with an error message on failure."""
    config_path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return load_project(file, config_path)
    except SlacklineError as e:
        raise _fail(str(e)) from None
    except (FileNotFoundError, ValueError) as e:
        raise _fail(f"Invalid config: {e}") from None


def _resolve_start(project: Project, start_date: str | None) -> date:
    parsed = _parse_date_option(start_date, "start-date")
    return parsed or project.start_date or date.today()  # noqa: DTZ011


def _run_schedule(project: Project, config: UnifiedConfig, start: date) -> SchedulingResult:
    try:
        result = SchedulingService(config.scheduler).schedule(
            project.tasks, project.all_dependencies(), start
        )
    except SlacklineError as e:
        raise _fail(str(e)) from None
    _echo_warnings(result.warnings)
    return result


def _echo_warnings(warnings: list[str]) -> None:
    if warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in warnings:
            typer.echo(f"  - {warning}", err=True)


def _display_schedule(scheduled_tasks: list[ScheduledTask]) -> None:
    """Display a schedule table to stdout."""
    typer.echo(
        f"{'Task':<20} {'ES':>4} {'EF':>4} {'LS':>4} {'LF':>4} {'TF':>6} {'FF':>6} "
        f"{'Lvl':>3}  {'Start':<10}  {'Due':<10}  Critical"
    )
    typer.echo("=" * 94)
    for st in scheduled_tasks:
        typer.echo(
            f"{st.task_id:<20} {st.early_start:>4} {st.early_finish:>4} "
            f"{st.late_start:>4} {st.late_finish:>4} {st.total_float:>6.1f} "
            f"{st.free_float:>6.1f} {st.level:>3}  {st.start_date.isoformat():<10}  "
            f"{st.due_date.isoformat():<10}  {'yes' if st.is_critical else ''}"
        )


def _export_schedule_csv(scheduled_tasks: list[ScheduledTask], output_path: Path) -> None:
    """Export a schedule to CSV."""
    with output_path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            [
                "task_id",
                "task_name",
                "early_start",
                "early_finish",
                "late_start",
                "late_finish",
                "total_float",
                "free_float",
                "is_critical",
                "level",
                "start_date",
                "due_date",
            ]
        )
        for st in scheduled_tasks:
            writer.writerow(
                [
                    st.task_id,
                    st.name,
                    st.early_start,
                    st.early_finish,
                    st.late_start,
                    st.late_finish,
                    st.total_float,
                    st.free_float,
                    st.is_critical,
                    st.level,
                    st.start_date.isoformat(),
                    st.due_date.isoformat(),
                ]
            )


@app.command()
def schedule(  # noqa: PLR0913 - CLI command needs multiple options
    ctx: typer.Context,
    file: FileArgument = Path("project.yaml"),
    start_date: StartDateOption = None,
    sort_by: Annotated[
        SortKey, typer.Option("--sort-by", help="Order of the schedule table")
    ] = SortKey.START,
    critical_only: Annotated[
        bool, typer.Option("--critical-only", help="Show only critical tasks")
    ] = False,
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", help="Export the schedule to a CSV file"),
    ] = None,
) -> None:
    """Compute the critical-path schedule and display it."""
    project, config = _load(ctx, file)
    start = _resolve_start(project, start_date)
    result = _run_schedule(project, config, start)

    rows = sorted(result.scheduled_tasks, key=_SORT_KEYS[sort_by])
    if critical_only:
        rows = [st for st in rows if st.is_critical]

    _display_schedule(rows)
    if result.critical_path:
        typer.echo(f"\nCritical path: {' -> '.join(result.critical_path)}")

    if output_csv:
        _export_schedule_csv(rows, output_csv)
        typer.echo(f"Schedule exported to {output_csv}")


@app.command()
def stats(
    ctx: typer.Context,
    file: FileArgument = Path("project.yaml"),
    start_date: StartDateOption = None,
) -> None:
    """Show project statistics and the critical path."""
    project, config = _load(ctx, file)
    start = _resolve_start(project, start_date)
    service = SchedulingService(config.scheduler)
    result = _run_schedule(project, config, start)
    statistics = service.get_project_statistics(result.scheduled_tasks, start)

    typer.echo(f"Project: {project.name or file.stem}")
    typer.echo(f"  Start:            {start.isoformat()}")
    typer.echo(f"  End:              {statistics.project_end_date.isoformat()}")
    typer.echo(f"  Duration:         {statistics.project_duration} working days")
    typer.echo(f"  Tasks:            {statistics.total_task_count}")
    typer.echo(f"  Critical tasks:   {statistics.critical_task_count}")
    typer.echo(f"  Critical length:  {statistics.critical_path_length} days")
    typer.echo(f"  Tasks with float: {statistics.tasks_with_float}")
    typer.echo(f"  Average float:    {statistics.average_float:.2f} days")
    if result.critical_path:
        typer.echo(f"  Critical path:    {' -> '.join(result.critical_path)}")


def _display_leveling(result: LevelingResult) -> None:
    typer.echo("\nResources")
    typer.echo("=" * 40)
    for resource_id, peak in sorted(result.peak_load.items()):
        line = f"  {resource_id:<20} peak {peak:.1f} h/day"
        if resource_id in result.resource_costs:
            line += f", cost {result.resource_costs[resource_id]:.2f}"
        typer.echo(line)

    if result.shifts:
        typer.echo("\nShifted tasks")
        for task_id, days in result.shifts.items():
            typer.echo(f"  {task_id}: +{days} day(s)")

    if result.conflicts:
        typer.echo("\nConflicts", err=True)
        for conflict in result.conflicts:
            typer.echo(
                f"  {conflict.task_id}: {', '.join(conflict.resource_ids)} "
                f"over capacity on days {conflict.overloaded_days}",
                err=True,
            )


@app.command()
def level(
    ctx: typer.Context,
    file: FileArgument = Path("project.yaml"),
    start_date: StartDateOption = None,
    output_csv: Annotated[
        Path | None,
        typer.Option("--output-csv", help="Export the leveled schedule to a CSV file"),
    ] = None,
) -> None:
    """Level resource usage within each task's float."""
    project, config = _load(ctx, file)
    start = _resolve_start(project, start_date)
    scheduled = _run_schedule(project, config, start)

    leveler = ResourceLeveler(config.leveling, config.scheduler)
    result = leveler.level(scheduled.scheduled_tasks, project.resources, project.assignments, start)

    _display_schedule(result.scheduled_tasks)
    _display_leveling(result)
    _echo_warnings(result.warnings)

    if output_csv:
        _export_schedule_csv(result.scheduled_tasks, output_csv)
        typer.echo(f"Leveled schedule exported to {output_csv}")


@app.command()
def simulate(
    ctx: typer.Context,
    file: FileArgument = Path("project.yaml"),
    start_date: StartDateOption = None,
    iterations: Annotated[
        int | None,
        typer.Option("--iterations", "-n", min=1, help="Number of trials (overrides config)"),
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Random seed for reproducible runs")
    ] = None,
) -> None:
    """Estimate project duration risk with a Monte Carlo simulation."""
    project, config = _load(ctx, file)
    start = _resolve_start(project, start_date)

    sim_config = config.simulation
    if seed is not None:
        sim_config = sim_config.model_copy(update={"seed": seed})

    simulator = RiskSimulator(sim_config, config.scheduler)
    try:
        summary = simulator.simulate(
            project.tasks, project.all_dependencies(), start, iterations=iterations
        )
    except SlacklineError as e:
        raise _fail(str(e)) from None

    typer.echo(f"Monte Carlo simulation ({summary.iterations} trials)")
    typer.echo(f"  P10:     {summary.p10} working days")
    typer.echo(f"  P50:     {summary.p50} working days")
    typer.echo(f"  P90:     {summary.p90} working days")
    typer.echo(f"  Mean:    {summary.mean:.2f}")
    typer.echo(f"  Std dev: {summary.std_dev:.2f}")
    _echo_warnings(summary.warnings)


def _format_gantt_output(mermaid_output: str, output: Path | None) -> None:
    """Format and write gantt output to file or stdout."""
    if output:
        if output.suffix.lower() == ".md":
            content = f"```mermaid\n{mermaid_output}\n```\n"
        else:
            content = mermaid_output
        output.write_text(content, encoding="utf-8")
        typer.echo(f"Gantt chart written to {output}")
    else:
        typer.echo(mermaid_output)


@app.command()
def gantt(
    ctx: typer.Context,
    file: FileArgument = Path("project.yaml"),
    start_date: StartDateOption = None,
    title: Annotated[
        str | None, typer.Option("--title", "-t", help="Chart title (overrides config)")
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (.md files get a mermaid code fence)"),
    ] = None,
) -> None:
    """Generate a Mermaid Gantt chart of the schedule."""
    project, config = _load(ctx, file)
    start = _resolve_start(project, start_date)
    result = _run_schedule(project, config, start)

    mermaid_output = GanttRenderer(config.gantt).render(result.scheduled_tasks, title=title)
    _format_gantt_output(mermaid_output, output)


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
