"""Backward pass: latest start and finish for every node."""

from collections import deque

from slackline.exceptions import CycleDetectedError
from slackline.logger import debug_enabled, get_logger
from slackline.models import DependencyType

from ..network import Network, NetworkEdge, NetworkNode

logger = get_logger()


def latest_finish_via(edge: NetworkEdge, succ: NetworkNode, duration: int) -> int:
    """Latest finish a single edge allows for a predecessor of the given duration.

    Mirror of ``earliest_start_via``: SS and SF constrain the predecessor's
    start, so its duration is added back to express them as a finish.
    """
    if edge.type == DependencyType.SS:
        return succ.late_start - edge.lag + duration
    if edge.type == DependencyType.FF:
        return succ.late_finish - edge.lag
    if edge.type == DependencyType.SF:
        return succ.late_finish - edge.lag + duration
    return succ.late_start - edge.lag


class BackwardPassEngine:
    """Computes late start/finish in reverse topological order.

    Every node is bounded by the project finish as well as by its
    successors, so no task can be scheduled to end after the project does.
    """

    def run(self, network: Network, project_finish: int) -> list[int]:
        """Run the backward pass in place.

        Args:
            network: Network whose forward pass has completed
            project_finish: Maximum early finish over all nodes

        Returns:
            Node indices in the order they were finalized (sinks first)

        Raises:
            CycleDetectedError: If some nodes can never become ready
        """
        waiting = [len(node.outgoing) for node in network.nodes]
        queue: deque[int] = deque(network.sinks())
        order: list[int] = []

        while queue:
            idx = queue.popleft()
            node = network.nodes[idx]
            self._compute_late_times(network, node, project_finish)
            order.append(idx)

            for edge in node.incoming:
                waiting[edge.source] -= 1
                if waiting[edge.source] == 0:
                    queue.append(edge.source)

        if len(order) != len(network.nodes):
            unresolved = {i for i, count in enumerate(waiting) if count > 0}
            raise CycleDetectedError(network.cycle_members(unresolved))

        return order

    def _compute_late_times(
        self, network: Network, node: NetworkNode, project_finish: int
    ) -> None:
        node.late_finish = min(
            [project_finish]
            + [
                latest_finish_via(edge, network.nodes[edge.target], node.duration)
                for edge in node.outgoing
            ]
        )
        node.late_start = node.late_finish - node.duration

        if debug_enabled():
            logger.debug(
                f"  backward {node.task_id}: LS={node.late_start} LF={node.late_finish}"
            )
