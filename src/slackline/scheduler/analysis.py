"""Float, criticality and dependency depth."""

from dataclasses import dataclass

from slackline.logger import get_logger

from .network import Network, NetworkNode
from .passes import earliest_start_via

logger = get_logger()

DEFAULT_EPSILON = 1e-3


@dataclass
class NodeAnalysis:
    """Derived CPM figures for one node."""

    total_float: float
    free_float: float
    is_critical: bool
    level: int


class CriticalPathAnalyzer:
    """Derives float, the critical flag and level from a completed pair of passes."""

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        """Initialize the analyzer.

        Args:
            epsilon: Total float below which a task counts as critical
        """
        self.epsilon = epsilon

    def analyze(self, network: Network, order: list[int]) -> list[NodeAnalysis]:
        """Analyze every node.

        Args:
            network: Network after forward and backward passes
            order: Topological order from the forward pass

        Returns:
            One NodeAnalysis per node, indexed like ``network.nodes``
        """
        levels = self._compute_levels(network, order)
        results: list[NodeAnalysis] = []

        for idx, node in enumerate(network.nodes):
            total_float = float(node.late_start - node.early_start)
            free_float = min(self._free_float(network, node), total_float)
            results.append(
                NodeAnalysis(
                    total_float=total_float,
                    free_float=free_float,
                    is_critical=abs(total_float) < self.epsilon,
                    level=levels[idx],
                )
            )

        return results

    def _free_float(self, network: Network, node: NetworkNode) -> float:
        """How far a node can slip without moving any successor's early start.

        For a plain FS edge this is ``successor.early_start - early_finish``;
        other edge types measure the gap against the constraint they impose.
        """
        if not node.outgoing:
            return float(node.late_finish - node.early_finish)

        return float(
            min(
                network.nodes[edge.target].early_start
                - earliest_start_via(edge, node, network.nodes[edge.target].duration)
                for edge in node.outgoing
            )
        )

    def _compute_levels(self, network: Network, order: list[int]) -> list[int]:
        """Longest predecessor chain per node, one pass in topological order."""
        levels = [0] * len(network.nodes)
        for idx in order:
            node = network.nodes[idx]
            if node.incoming:
                levels[idx] = 1 + max(levels[edge.source] for edge in node.incoming)
        return levels

    def critical_path(
        self, network: Network, order: list[int], analysis: list[NodeAnalysis]
    ) -> list[str]:
        """Return one source-to-sink chain made entirely of critical tasks.

        Follows, from the earliest critical source, the critical successor
        that starts first. Returns an empty list for an empty network.
        """
        critical_sources = [
            idx for idx in order if analysis[idx].is_critical and not network.nodes[idx].incoming
        ]
        if not critical_sources:
            return []

        path: list[str] = []
        current = min(critical_sources, key=lambda i: network.nodes[i].early_start)
        visited: set[int] = set()
        while current not in visited:
            visited.add(current)
            node = network.nodes[current]
            path.append(node.task_id)
            critical_next = [
                edge.target for edge in node.outgoing if analysis[edge.target].is_critical
            ]
            if not critical_next:
                break
            current = min(critical_next, key=lambda i: network.nodes[i].early_start)

        logger.checks(f"Critical path: {' -> '.join(path)}")
        return path
