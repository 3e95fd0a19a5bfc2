"""Scheduler package - critical-path scheduling.

This package provides the CPM pipeline and the passes built on top of it:
- Business calendar arithmetic
- Network construction, forward and backward passes, float analysis
- SchedulingService orchestrating the pipeline and computing statistics
- ResourceLeveler for greedy capacity leveling within float
- RiskSimulator for Monte Carlo duration risk

Main entry points:
- SchedulingService / schedule_tasks: schedule a batch of tasks
- ResourceLeveler: level a schedule against resource capacity
- RiskSimulator / monte_carlo_simulation: duration risk percentiles
"""

# Analysis
from .analysis import CriticalPathAnalyzer, NodeAnalysis

# Calendar
from .calendar import add_working_days, hours_to_days, is_working_day, working_days_between

# Configuration
from .config import LevelingConfig, MissingReferencePolicy, SchedulingConfig, SimulationConfig

# Core dataclasses
from .core import (
    LevelingConflict,
    LevelingResult,
    ProjectStatistics,
    RiskSummary,
    ScheduledTask,
    SchedulingResult,
)

# Leveling
from .leveling import ResourceLeveler, leveling_order

# Network
from .network import Network, NetworkBuilder, NetworkEdge, NetworkNode

# Passes
from .passes import BackwardPassEngine, ForwardPassEngine
from .resources import ResourceLedger

# High-level service
from .service import SchedulingService, schedule_tasks

# Simulation
from .simulation import RiskSimulator, monte_carlo_simulation

__all__ = [
    # Core dataclasses
    "ScheduledTask",
    "SchedulingResult",
    "ProjectStatistics",
    "LevelingConflict",
    "LevelingResult",
    "RiskSummary",
    # Configuration
    "SchedulingConfig",
    "MissingReferencePolicy",
    "LevelingConfig",
    "SimulationConfig",
    # Calendar
    "add_working_days",
    "hours_to_days",
    "is_working_day",
    "working_days_between",
    # Network and passes
    "Network",
    "NetworkBuilder",
    "NetworkEdge",
    "NetworkNode",
    "ForwardPassEngine",
    "BackwardPassEngine",
    "CriticalPathAnalyzer",
    "NodeAnalysis",
    # High-level service
    "SchedulingService",
    "schedule_tasks",
    # Leveling
    "ResourceLeveler",
    "ResourceLedger",
    "leveling_order",
    # Simulation
    "RiskSimulator",
    "monte_carlo_simulation",
]
