"""Project loading with config discovery."""

from __future__ import annotations

from pathlib import Path

from .models import Project
from .parser import ProjectParser
from .unified_config import DEFAULT_CONFIG_NAME, UnifiedConfig, load_unified_config


def discover_config(
    project_path: Path | str,
    config_path: Path | None = None,
) -> UnifiedConfig | None:
    """Discover unified config from various locations.

    Search order:
    1. Explicit config_path argument
    2. project file directory / slackline_config.yaml
    3. Current directory / slackline_config.yaml

    An explicit path that does not exist is an error; the fallbacks are
    simply skipped when absent.
    """
    # 1. Explicit argument
    if config_path is not None:
        return load_unified_config(config_path)

    # 2. Project directory
    dir_config = Path(project_path).parent / DEFAULT_CONFIG_NAME
    if dir_config.exists():
        return load_unified_config(dir_config)

    # 3. Current directory
    cwd_config = Path(DEFAULT_CONFIG_NAME)
    if cwd_config.exists():
        return load_unified_config(cwd_config)

    return None


def load_project(
    path: Path | str,
    config_path: Path | None = None,
) -> tuple[Project, UnifiedConfig]:
    """Load a project file together with the config that applies to it.

    Args:
        path: Path to the project YAML file
        config_path: Optional explicit path to config file

    Returns:
        The parsed Project and its UnifiedConfig (defaults if none was found)

    Raises:
        ParseError: If the file is missing or is not valid YAML
        ValidationError: If the YAML does not match the project schema
        FileNotFoundError: If an explicit config path does not exist
        ValueError: If the config file is invalid
    """
    path = Path(path)
    config = discover_config(path, config_path) or UnifiedConfig()
    project = ProjectParser().parse_file(path)
    return project, config
