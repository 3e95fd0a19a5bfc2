"""Forward and backward CPM traversals."""

from .backward import BackwardPassEngine, latest_finish_via
from .forward import ForwardPassEngine, earliest_start_via

__all__ = [
    "BackwardPassEngine",
    "ForwardPassEngine",
    "earliest_start_via",
    "latest_finish_via",
]
