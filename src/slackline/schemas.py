"""Pydantic schemas for YAML data validation."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import DependencyType


def _coerce_id_list(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, list):
        return [str(item) for item in v]  # type: ignore[misc]
    return [str(v)]


class TaskSchema(BaseModel):
    """Schema for a task entry."""

    name: str = ""
    estimated_hours: float | None = Field(default=None, ge=0)
    dependencies: list[str] = Field(default_factory=list)
    predecessors: list[str] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("dependencies", "predecessors", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Accept a single id or ids written as numbers."""
        return _coerce_id_list(v)


class DependencySchema(BaseModel):
    """Schema for an explicit dependency edge."""

    predecessor: str
    successor: str
    type: DependencyType = DependencyType.FS
    lag: int = 0

    @field_validator("predecessor", "successor", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Task ids may be written as numbers in YAML."""
        return str(v)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept lowercase dependency types."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class ResourceSchema(BaseModel):
    """Schema for a resource entry."""

    name: str = ""
    availability: float = Field(default=8.0, ge=0)
    cost: float | None = Field(default=None, ge=0)


class AssignmentSchema(BaseModel):
    """Schema for a task-resource assignment."""

    task: str
    resource: str
    hours_per_day: float = Field(gt=0)
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("task", "resource", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Ids may be written as numbers in YAML."""
        return str(v)

    @model_validator(mode="after")
    def validate_window(self) -> AssignmentSchema:
        """Ensure the advisory window is not inverted."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("assignment end_date must not be before start_date")
        return self


class MetadataSchema(BaseModel):
    """Schema for project metadata."""

    name: str = ""
    start_date: date | None = None


class ProjectSchema(BaseModel):
    """Schema for the entire project YAML file."""

    metadata: MetadataSchema = Field(default_factory=MetadataSchema)
    tasks: dict[str, TaskSchema] = Field(default_factory=dict)
    dependencies: list[DependencySchema] = Field(default_factory=list)
    resources: dict[str, ResourceSchema] = Field(default_factory=dict)
    assignments: list[AssignmentSchema] = Field(default_factory=list)

    @field_validator("tasks", "resources", mode="before")
    @classmethod
    def coerce_keys(cls, v: Any) -> Any:
        """Stringify numeric keys and allow empty entries."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(k): ({} if val is None else val) for k, val in v.items()}  # type: ignore[misc]
        return v

    @field_validator("dependencies", "assignments", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        """Treat an empty section as an empty list."""
        return [] if v is None else v
