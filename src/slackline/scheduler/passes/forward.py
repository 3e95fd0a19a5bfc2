"""Forward pass: earliest start and finish for every node."""

from collections import deque

from slackline.exceptions import CycleDetectedError
from slackline.logger import debug_enabled, get_logger
from slackline.models import DependencyType

from ..network import Network, NetworkEdge, NetworkNode

logger = get_logger()


def earliest_start_via(edge: NetworkEdge, pred: NetworkNode, duration: int) -> int:
    """Earliest start a single edge allows for a successor of the given duration.

    FF and SF constrain the successor's finish, so the successor's own
    duration is subtracted to express them as a start. Every constraint is
    floored at the project start: FS and SS on the successor's start, FF and
    SF on its finish. A long FF/SF successor can therefore still start before
    day zero, but negative lag alone never pulls work ahead of the project.
    """
    if edge.type == DependencyType.SS:
        return max(pred.early_start + edge.lag, 0)
    if edge.type == DependencyType.FF:
        return max(pred.early_finish + edge.lag, 0) - duration
    if edge.type == DependencyType.SF:
        return max(pred.early_start + edge.lag, 0) - duration
    return max(pred.early_finish + edge.lag, 0)


class ForwardPassEngine:
    """Computes early start/finish in topological order.

    A node is only evaluated once every one of its predecessors has been
    finalized, so each node is visited exactly once and the latest-arriving
    constraint governs.
    """

    def run(self, network: Network) -> list[int]:
        """Run the forward pass in place.

        Returns:
            Node indices in the topological order they were finalized

        Raises:
            CycleDetectedError: If some nodes can never become ready
        """
        waiting = [len(node.incoming) for node in network.nodes]
        queue: deque[int] = deque(network.sources())
        order: list[int] = []

        while queue:
            idx = queue.popleft()
            node = network.nodes[idx]
            self._compute_early_times(network, node)
            order.append(idx)

            for edge in node.outgoing:
                waiting[edge.target] -= 1
                if waiting[edge.target] == 0:
                    queue.append(edge.target)

        if len(order) != len(network.nodes):
            unresolved = {i for i, count in enumerate(waiting) if count > 0}
            raise CycleDetectedError(network.cycle_members(unresolved))

        return order

    def _compute_early_times(self, network: Network, node: NetworkNode) -> None:
        if node.incoming:
            node.early_start = max(
                earliest_start_via(edge, network.nodes[edge.source], node.duration)
                for edge in node.incoming
            )
        else:
            node.early_start = 0
        node.early_finish = node.early_start + node.duration

        if debug_enabled():
            logger.debug(
                f"  forward {node.task_id}: ES={node.early_start} EF={node.early_finish}"
            )
