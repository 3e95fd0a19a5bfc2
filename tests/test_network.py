"""Tests for network construction."""

import pytest

from slackline.exceptions import MissingReferenceError, ValidationError
from slackline.models import DependencyType, Task
from slackline.scheduler import MissingReferencePolicy, NetworkBuilder, SchedulingConfig
from tests.conftest import edge, fs, tasks_by_hours


class TestNetworkBuilder:
    """Test building the node arena from tasks and edges."""

    def test_nodes_follow_input_order(self) -> None:
        """Each task gets the arena slot matching its input position."""
        network = NetworkBuilder().build(tasks_by_hours(A=8, B=16, C=0), [])

        assert [node.task_id for node in network.nodes] == ["A", "B", "C"]
        assert network.index == {"A": 0, "B": 1, "C": 2}
        assert [node.duration for node in network.nodes] == [1, 2, 0]

    def test_missing_estimate_is_zero_duration(self) -> None:
        """A task without an estimate has zero duration."""
        network = NetworkBuilder().build([Task(id="M")], [])
        assert network.node("M").duration == 0

    def test_duration_uses_configured_day_length(self) -> None:
        """Durations use the configured hours per day."""
        config = SchedulingConfig(hours_per_day=4)
        network = NetworkBuilder(config).build(tasks_by_hours(A=8), [])
        assert network.node("A").duration == 2

    def test_edges_wired_both_ways(self) -> None:
        """An edge appears on the successor's incoming and predecessor's outgoing lists."""
        network = NetworkBuilder().build(
            tasks_by_hours(A=8, B=8), [edge("A", "B", DependencyType.SS, 2)]
        )

        a, b = network.node("A"), network.node("B")
        assert len(a.outgoing) == 1
        assert a.outgoing[0] is b.incoming[0]
        assert a.outgoing[0].type == DependencyType.SS
        assert a.outgoing[0].lag == 2
        assert network.sources() == [0]
        assert network.sinks() == [1]

    def test_identical_duplicate_edges_collapse(self) -> None:
        """The same edge listed twice is wired once."""
        network = NetworkBuilder().build(tasks_by_hours(A=8, B=8), fs(("A", "B"), ("A", "B")))
        assert len(network.node("B").incoming) == 1

    def test_conflicting_duplicate_edges_rejected(self) -> None:
        """Two edges for one pair that disagree on type or lag are an error."""
        with pytest.raises(ValidationError, match="Conflicting dependencies"):
            NetworkBuilder().build(
                tasks_by_hours(A=8, B=8), [edge("A", "B"), edge("A", "B", lag=1)]
            )

    def test_duplicate_task_id_rejected(self) -> None:
        """Task ids must be unique."""
        with pytest.raises(ValidationError, match="Duplicate task id: A"):
            NetworkBuilder().build([Task(id="A"), Task(id="A")], [])

    def test_negative_effort_rejected(self) -> None:
        """Negative effort is invalid input."""
        with pytest.raises(ValidationError, match="negative effort"):
            NetworkBuilder().build(tasks_by_hours(A=-1), [])


class TestMissingReferences:
    """Test the policy for edges that name unknown tasks."""

    def test_warn_drops_edge_and_records_warning(self) -> None:
        """By default the edge is dropped and a warning recorded."""
        network = NetworkBuilder().build(tasks_by_hours(A=8), fs(("ghost", "A")))

        assert network.node("A").incoming == []
        assert len(network.warnings) == 1
        assert "unknown task 'ghost'" in network.warnings[0]

    def test_ignore_drops_edge_silently(self) -> None:
        """The ignore policy drops the edge without a warning."""
        config = SchedulingConfig(missing_references=MissingReferencePolicy.IGNORE)
        network = NetworkBuilder(config).build(tasks_by_hours(A=8), fs(("A", "ghost")))

        assert network.node("A").outgoing == []
        assert network.warnings == []

    def test_error_raises(self) -> None:
        """The error policy aborts with the offending ids."""
        config = SchedulingConfig(missing_references=MissingReferencePolicy.ERROR)
        with pytest.raises(MissingReferenceError) as exc_info:
            NetworkBuilder(config).build(tasks_by_hours(A=8), fs(("A", "ghost")))

        assert exc_info.value.predecessor_id == "A"
        assert exc_info.value.successor_id == "ghost"
        assert exc_info.value.missing_id == "ghost"

    def test_missing_reference_is_validation_error(self) -> None:
        """Callers can catch every input problem as ValidationError."""
        assert issubclass(MissingReferenceError, ValidationError)


class TestCycleMembers:
    """Test narrowing unresolved nodes down to cycle members."""

    def test_peels_downstream_nodes(self) -> None:
        """Nodes fed by a cycle are not reported as part of it."""
        network = NetworkBuilder().build(
            tasks_by_hours(A=8, B=8, C=8), fs(("A", "B"), ("B", "A"), ("B", "C"))
        )
        assert sorted(network.cycle_members({0, 1, 2})) == ["A", "B"]
