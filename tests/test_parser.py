"""Tests for YAML parsing."""

from datetime import date
from pathlib import Path

import pytest

from slackline.exceptions import ParseError, ValidationError
from slackline.models import DependencyType
from slackline.parser import ProjectParser


class TestProjectParser:
    """Test parsing project files into models."""

    def test_parse_full_project(self, tmp_path: Path) -> None:
        """Every section maps onto the corresponding model."""
        yaml_content = """
metadata:
  name: Demo
  start_date: 2025-03-03

tasks:
  design:
    name: Design
    estimated_hours: 16
  build:
    name: Build
    estimated_hours: 40
    dependencies: [design]
    meta:
      owner: alice
  review:
    predecessors: build

dependencies:
  - predecessor: design
    successor: review
    type: ss
    lag: 2

resources:
  dev:
    name: Developer
    availability: 6
    cost: 80

assignments:
  - task: build
    resource: dev
    hours_per_day: 6
    start_date: 2025-03-05
"""
        path = tmp_path / "project.yaml"
        path.write_text(yaml_content)

        project = ProjectParser().parse_file(path)

        assert project.name == "Demo"
        assert project.start_date == date(2025, 3, 3)
        assert [t.id for t in project.tasks] == ["design", "build", "review"]

        build = project.get_task_by_id("build")
        assert build is not None
        assert build.estimated_hours == 40
        assert build.dependencies == ["design"]
        assert build.meta == {"owner": "alice"}

        review = project.get_task_by_id("review")
        assert review is not None
        assert review.predecessors == ["build"]
        assert review.estimated_hours is None

        assert len(project.dependencies) == 1
        assert project.dependencies[0].type == DependencyType.SS
        assert project.dependencies[0].lag == 2

        assert project.resources[0].id == "dev"
        assert project.resources[0].availability == 6
        assert project.resources[0].cost == 80

        assert project.assignments[0].task_id == "build"
        assert project.assignments[0].start_date == date(2025, 3, 5)

    def test_numeric_ids_coerced(self) -> None:
        """Ids written as numbers become strings."""
        project = ProjectParser().parse_data(
            {
                "tasks": {1: {"estimated_hours": 8}, 2: {"dependencies": [1]}},
                "dependencies": [{"predecessor": 1, "successor": 2}],
            }
        )

        assert [t.id for t in project.tasks] == ["1", "2"]
        assert project.tasks[1].dependencies == ["1"]
        assert project.dependencies[0].key == ("1", "2")

    def test_empty_sections_allowed(self) -> None:
        """Sections left empty in YAML parse as empty."""
        project = ProjectParser().parse_data(
            {"tasks": {"a": None}, "dependencies": None, "resources": None}
        )

        assert [t.id for t in project.tasks] == ["a"]
        assert project.dependencies == []
        assert project.resources == []

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a parse error."""
        with pytest.raises(ParseError, match="File not found"):
            ProjectParser().parse_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML is a parse error."""
        path = tmp_path / "bad.yaml"
        path.write_text("tasks: [unclosed\n")

        with pytest.raises(ParseError, match="Failed to parse YAML"):
            ProjectParser().parse_file(path)

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        """A list at the root is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ParseError, match="dictionary"):
            ProjectParser().parse_file(path)

    def test_negative_hours_rejected(self) -> None:
        """Schema validation rejects negative effort."""
        with pytest.raises(ValidationError, match="Invalid YAML structure"):
            ProjectParser().parse_data({"tasks": {"a": {"estimated_hours": -4}}})

    def test_unknown_dependency_type_rejected(self) -> None:
        """Only FS, SS, FF and SF are accepted."""
        with pytest.raises(ValidationError):
            ProjectParser().parse_data(
                {"dependencies": [{"predecessor": "a", "successor": "b", "type": "XX"}]}
            )

    def test_inverted_assignment_window_rejected(self) -> None:
        """An assignment may not end before it starts."""
        with pytest.raises(ValidationError):
            ProjectParser().parse_data(
                {
                    "assignments": [
                        {
                            "task": "a",
                            "resource": "r",
                            "hours_per_day": 4,
                            "start_date": "2025-01-10",
                            "end_date": "2025-01-01",
                        }
                    ]
                }
            )
