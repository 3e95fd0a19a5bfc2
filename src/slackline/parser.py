"""YAML parser for Slackline project files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Dependency, Project, Resource, ResourceAssignment, Task
from .schemas import ProjectSchema


class ProjectParser:
    """Parser for project YAML files.

    This parser only handles YAML parsing and model creation. For loading
    with config discovery use load_project() from slackline.loader.
    """

    def parse_file(self, file_path: Path | str) -> Project:
        """Parse a YAML file into a Project."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> Project:
        """Convert already-loaded YAML data into a Project."""
        try:
            schema = ProjectSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid YAML structure: {e}") from e

        tasks = [
            Task(
                id=task_id,
                name=task_data.name,
                estimated_hours=task_data.estimated_hours,
                dependencies=list(task_data.dependencies),
                predecessors=list(task_data.predecessors),
                meta=task_data.meta.copy(),
            )
            for task_id, task_data in schema.tasks.items()
        ]

        dependencies = [
            Dependency(
                predecessor_id=dep.predecessor,
                successor_id=dep.successor,
                type=dep.type,
                lag=dep.lag,
            )
            for dep in schema.dependencies
        ]

        resources = [
            Resource(
                id=resource_id,
                name=resource_data.name,
                availability=resource_data.availability,
                cost=resource_data.cost,
            )
            for resource_id, resource_data in schema.resources.items()
        ]

        assignments = [
            ResourceAssignment(
                task_id=a.task,
                resource_id=a.resource,
                hours_per_day=a.hours_per_day,
                start_date=a.start_date,
                end_date=a.end_date,
            )
            for a in schema.assignments
        ]

        return Project(
            name=schema.metadata.name,
            start_date=schema.metadata.start_date,
            tasks=tasks,
            dependencies=dependencies,
            resources=resources,
            assignments=assignments,
        )
