"""Mermaid Gantt rendering for computed schedules."""

from __future__ import annotations

import re
from itertools import groupby

from .scheduler import ScheduledTask, add_working_days
from .unified_config import GanttConfig

_MERMAID_ID_RE = re.compile(r"[^A-Za-z0-9_]")


def mermaid_id(task_id: str) -> str:
    """Make a task id safe for use as a Mermaid task reference."""
    safe = _MERMAID_ID_RE.sub("_", task_id)
    if not safe or safe[0].isdigit():
        safe = f"t_{safe}"
    return safe


def _label(st: ScheduledTask) -> str:
    # ':' and '#' terminate the label in Mermaid gantt syntax
    return st.name.replace(":", " ").replace("#", " ").strip() or mermaid_id(st.task_id)


class GanttRenderer:
    """Renders scheduled tasks as a Mermaid gantt chart.

    Tasks are grouped into one section per dependency level and ordered by
    early start within a section. Critical tasks carry the ``crit`` tag and
    zero-duration tasks are drawn as milestones.
    """

    def __init__(self, config: GanttConfig | None = None):
        self.config = config or GanttConfig()

    def render(self, scheduled_tasks: list[ScheduledTask], *, title: str | None = None) -> str:
        """Generate Mermaid gantt syntax for ``scheduled_tasks``."""
        lines = self._build_header(title or self.config.title)

        ordered = sorted(scheduled_tasks, key=lambda st: (st.level, st.early_start, st.task_id))
        for level, group in groupby(ordered, key=lambda st: st.level):
            lines.append("")
            lines.append(f"    section Level {level}")
            for st in group:
                self._add_task(lines, st)

        return "\n".join(lines)

    def _build_header(self, title: str) -> list[str]:
        lines = [
            "gantt",
            f"    title {title}",
            "    dateFormat YYYY-MM-DD",
            "    excludes weekends",
        ]
        if self.config.tick_interval:
            lines.append(f"    tickInterval {self.config.tick_interval}")
        if self.config.axis_format:
            lines.append(f"    axisFormat {self.config.axis_format}")
        return lines

    def _add_task(self, lines: list[str], st: ScheduledTask) -> None:
        label = _label(st)
        ref = mermaid_id(st.task_id)
        start_str = st.start_date.strftime("%Y-%m-%d")

        if st.duration == 0:
            tags = "milestone, crit, " if st.is_critical else "milestone, "
            lines.append(f"    {label} :{tags}{ref}, {start_str}, 0d")
            return

        tags = "crit, " if st.is_critical else ""
        end_str = st.due_date.strftime("%Y-%m-%d")
        lines.append(f"    {label} :{tags}{ref}, {start_str}, {end_str}")

        slack = st.late_finish - st.early_finish
        if self.config.show_float and slack > 0:
            float_end = add_working_days(st.due_date, slack)
            lines.append(
                f"    {label} float :done, {ref}_float, {end_str}, {float_end.strftime('%Y-%m-%d')}"
            )


def render_gantt(
    scheduled_tasks: list[ScheduledTask],
    config: GanttConfig | None = None,
    *,
    title: str | None = None,
) -> str:
    """Functional shortcut for ``GanttRenderer(config).render(...)``."""
    return GanttRenderer(config).render(scheduled_tasks, title=title)
