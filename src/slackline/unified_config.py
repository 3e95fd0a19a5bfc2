"""Unified configuration loader.

A single configuration file (slackline_config.yaml) holds the settings for
every stage: scheduling, leveling, simulation and Gantt rendering.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .scheduler import LevelingConfig, SchedulingConfig, SimulationConfig

DEFAULT_CONFIG_NAME = "slackline_config.yaml"


class GanttConfig(BaseModel):
    """Configuration for Gantt chart generation."""

    title: str = "Project Schedule"
    show_float: bool = False  # Draw each task's float as a trailing bar
    tick_interval: str | None = None  # Mermaid tickInterval, e.g. "1week"
    axis_format: str | None = None  # Mermaid axisFormat, e.g. "%b %d"


class UnifiedConfig(BaseModel):
    """All Slackline settings, each section optional in the file."""

    scheduler: SchedulingConfig = Field(default_factory=SchedulingConfig)
    leveling: LevelingConfig = Field(default_factory=LevelingConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    gantt: GanttConfig = Field(default_factory=GanttConfig)


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from YAML file.

    Args:
        config_path: Path to slackline_config.yaml

    Returns:
        UnifiedConfig with defaults for any missing section

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if data is None:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the root level")

    unknown = set(data) - set(UnifiedConfig.model_fields)  # type: ignore[arg-type]
    if unknown:
        raise ValueError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    # Explicit nulls fall back to section defaults
    sections = {key: value for key, value in data.items() if value is not None}  # type: ignore[misc]
    return UnifiedConfig.model_validate(sections)
