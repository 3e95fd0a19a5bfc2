"""Configuration classes for the scheduling system."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class MissingReferencePolicy(str, Enum):
    """What to do with a dependency that names a task outside the batch."""

    IGNORE = "ignore"  # Drop the edge silently
    WARN = "warn"  # Drop the edge and report a warning
    ERROR = "error"  # Abort scheduling with MissingReferenceError


class SchedulingConfig(BaseModel):
    """Configuration for the critical-path pipeline."""

    # Calendar: effort hours that make up one working day
    hours_per_day: float = Field(default=8.0, gt=0)

    # Tasks whose total float is within epsilon of zero are critical
    critical_float_epsilon: float = Field(default=1e-3, gt=0)

    missing_references: MissingReferencePolicy = MissingReferencePolicy.WARN


class LevelingConfig(BaseModel):
    """Configuration for the greedy resource leveler."""

    enabled: bool = True
    # Cap on how far past its early start a task may be pushed (None = up to late start)
    max_shift_days: int | None = Field(default=None, ge=0)


class SimulationConfig(BaseModel):
    """Configuration for Monte Carlo schedule risk analysis."""

    iterations: int = Field(default=1000, ge=1)
    # Effort multiplier range, drawn uniformly per task per trial
    low: float = Field(default=0.8, ge=0)
    high: float = Field(default=1.2, ge=0)
    seed: int | None = None

    @model_validator(mode="after")
    def validate_range(self) -> "SimulationConfig":
        """Ensure the multiplier range is not inverted."""
        if self.low > self.high:
            raise ValueError("simulation.low must not exceed simulation.high")
        return self
