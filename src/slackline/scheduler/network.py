"""Activity-on-node network construction.

Nodes live in an arena (``Network.nodes``) and refer to each other by integer
index, so a network can be copied or discarded without any object cycles.
A fresh network is built for every scheduling call.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from slackline.exceptions import MissingReferenceError, ValidationError
from slackline.logger import get_logger
from slackline.models import Dependency, DependencyType

from .calendar import hours_to_days
from .config import MissingReferencePolicy, SchedulingConfig

if TYPE_CHECKING:
    from slackline.models import Task

logger = get_logger()


@dataclass(frozen=True)
class NetworkEdge:
    """A dependency between two nodes, by arena index."""

    source: int
    target: int
    type: DependencyType
    lag: int


def _default_edge_list() -> list[NetworkEdge]:
    return []


@dataclass
class NetworkNode:
    """Working state for one task during a single scheduling call."""

    task: "Task"
    duration: int
    incoming: list[NetworkEdge] = field(default_factory=_default_edge_list)
    outgoing: list[NetworkEdge] = field(default_factory=_default_edge_list)
    early_start: int = 0
    early_finish: int = 0
    late_start: int = 0
    late_finish: int = 0

    @property
    def task_id(self) -> str:
        return self.task.id


def _default_node_list() -> list[NetworkNode]:
    return []


def _default_index() -> dict[str, int]:
    return {}


def _default_str_list() -> list[str]:
    return []


@dataclass
class Network:
    """The dependency graph for one batch of tasks."""

    nodes: list[NetworkNode] = field(default_factory=_default_node_list)
    index: dict[str, int] = field(default_factory=_default_index)  # task_id -> arena slot
    warnings: list[str] = field(default_factory=_default_str_list)

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, task_id: str) -> NetworkNode:
        """Get the node for a task id."""
        return self.nodes[self.index[task_id]]

    def sources(self) -> list[int]:
        """Indices of nodes without predecessors."""
        return [i for i, node in enumerate(self.nodes) if not node.incoming]

    def sinks(self) -> list[int]:
        """Indices of nodes without successors."""
        return [i for i, node in enumerate(self.nodes) if not node.outgoing]

    def cycle_members(self, unresolved: set[int]) -> list[str]:
        """Narrow a set of never-finalized nodes down to the ones on cycles.

        Nodes merely upstream or downstream of a cycle are peeled off by
        repeatedly dropping nodes with no edge into, or no edge out of, the
        remaining set.
        """
        remaining = set(unresolved)
        changed = True
        while changed:
            changed = False
            for idx in sorted(remaining):
                node = self.nodes[idx]
                has_out = any(edge.target in remaining for edge in node.outgoing)
                has_in = any(edge.source in remaining for edge in node.incoming)
                if not (has_out and has_in):
                    remaining.discard(idx)
                    changed = True
        members = remaining or unresolved
        return [self.nodes[idx].task_id for idx in members]


class NetworkBuilder:
    """Turns tasks and dependency edges into a ``Network``."""

    def __init__(self, config: SchedulingConfig | None = None):
        self.config = config or SchedulingConfig()

    def build(self, tasks: "list[Task]", dependencies: list[Dependency]) -> Network:
        """Create one node per task and wire every edge whose endpoints both exist.

        Raises:
            ValidationError: On duplicate task ids, negative effort, or two edges
                for the same pair that disagree on type or lag
            MissingReferenceError: If an edge names an unknown task and the
                missing-reference policy is ``error``
        """
        network = Network()

        for task in tasks:
            if task.id in network.index:
                raise ValidationError(f"Duplicate task id: {task.id}")
            if task.effort_hours < 0:
                raise ValidationError(
                    f"Task {task.id} has negative effort ({task.effort_hours}h)"
                )
            duration = hours_to_days(task.effort_hours, self.config.hours_per_day)
            network.index[task.id] = len(network.nodes)
            network.nodes.append(NetworkNode(task=task, duration=duration))

        wired: dict[tuple[str, str], Dependency] = {}
        for dep in dependencies:
            missing_id = self._find_missing_endpoint(network, dep)
            if missing_id is not None:
                self._handle_missing_reference(network, dep, missing_id)
                continue

            existing = wired.get(dep.key)
            if existing is not None:
                if (existing.type, existing.lag) != (dep.type, dep.lag):
                    raise ValidationError(
                        f"Conflicting dependencies for {dep.predecessor_id} -> "
                        f"{dep.successor_id}: {existing} vs {dep}"
                    )
                continue
            wired[dep.key] = dep

            edge = NetworkEdge(
                source=network.index[dep.predecessor_id],
                target=network.index[dep.successor_id],
                type=dep.type,
                lag=dep.lag,
            )
            network.nodes[edge.source].outgoing.append(edge)
            network.nodes[edge.target].incoming.append(edge)
            logger.debug(f"  Wired {dep}")

        logger.debug(f"Built network: {len(network.nodes)} nodes, {len(wired)} edges")
        return network

    def _find_missing_endpoint(self, network: Network, dep: Dependency) -> str | None:
        if dep.predecessor_id not in network.index:
            return dep.predecessor_id
        if dep.successor_id not in network.index:
            return dep.successor_id
        return None

    def _handle_missing_reference(
        self, network: Network, dep: Dependency, missing_id: str
    ) -> None:
        policy = self.config.missing_references
        if policy == MissingReferencePolicy.ERROR:
            raise MissingReferenceError(dep.predecessor_id, dep.successor_id, missing_id)
        if policy == MissingReferencePolicy.WARN:
            message = f"Dropped dependency {dep}: unknown task '{missing_id}'"
            logger.warning(message)
            network.warnings.append(message)

