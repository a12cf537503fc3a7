"""
Tests for the capacitated network model.

Covers node and role management, arc validation, batch arc input,
copying, and whole-graph validation.
"""

import pytest

from pipeflow.errors import GraphValidationError
from pipeflow.model.network import Arc, CapacitatedGraph, Node, NodeRole


class TestNodes:
    def test_add_node_defaults(self):
        g = CapacitatedGraph()
        node = g.add_node("A")
        assert node == Node("A")
        assert node.role is NodeRole.NORMAL
        assert node.attrs == {}
        assert "A" in g
        assert len(g) == 1

    def test_add_node_attrs(self):
        g = CapacitatedGraph()
        node = g.add_node("A", x=120.5, y=80)
        assert node.attrs == {"x": 120.5, "y": 80}

    def test_duplicate_node(self):
        g = CapacitatedGraph()
        g.add_node("A")
        with pytest.raises(GraphValidationError, match="Node 'A' already exists"):
            g.add_node("A")

    @pytest.mark.parametrize("bad_id", ["", "   ", None, 3])
    def test_invalid_node_id(self, bad_id):
        with pytest.raises(GraphValidationError, match="non-empty string"):
            CapacitatedGraph().add_node(bad_id)

    def test_remove_node_drops_incident_arcs(self, pipes4):
        pipes4.remove_node("B")
        assert "B" not in pipes4
        assert list(pipes4.arcs) == ["ac", "cd"]
        assert pipes4.get_arc("A", "B") is None

    def test_remove_missing_node(self):
        with pytest.raises(GraphValidationError):
            CapacitatedGraph().remove_node("A")


class TestRoles:
    def test_source_and_sink_properties(self, pipes4):
        assert pipes4.source is None and pipes4.sink is None
        pipes4.set_source("A")
        pipes4.set_sink("D")
        assert pipes4.source == "A"
        assert pipes4.sink == "D"
        assert pipes4.nodes["A"].role is NodeRole.SOURCE

    def test_new_source_demotes_previous(self, pipes4):
        pipes4.set_source("A")
        pipes4.set_source("B")
        assert pipes4.source == "B"
        assert pipes4.nodes["A"].role is NodeRole.NORMAL

    def test_role_on_add(self):
        g = CapacitatedGraph()
        g.add_node("A", role=NodeRole.SOURCE)
        g.add_node("B", role="source")
        g.add_node("C", role="sink")
        assert g.source == "B"
        assert g.sink == "C"
        assert g.nodes["A"].role is NodeRole.NORMAL

    def test_sink_can_move_onto_source_node(self, pipes4):
        pipes4.set_source("A")
        pipes4.set_sink("A")
        assert pipes4.sink == "A"
        assert pipes4.source is None

    def test_unknown_role_node(self, pipes4):
        with pytest.raises(GraphValidationError, match="'Z' does not exist"):
            pipes4.set_sink("Z")


class TestArcs:
    def test_add_arc(self):
        g = CapacitatedGraph.from_arcs([], nodes=["A", "B"])
        arc = g.add_arc("A", "B", 5)
        assert arc.flow == 0
        assert arc.pair == ("A", "B")
        assert len(arc.id) == 22
        assert g.get_arc("A", "B") is arc
        assert g.get_arc("B", "A") is None

    def test_generated_ids_are_unique(self):
        g = CapacitatedGraph.from_arcs([], nodes=["A", "B", "C"])
        a1 = g.add_arc("A", "B", 1)
        a2 = g.add_arc("B", "C", 1)
        assert a1.id != a2.id

    def test_reverse_arc_is_allowed(self):
        g = CapacitatedGraph.from_arcs([("A", "B", 5), ("B", "A", 3)])
        assert g.antiparallel_pairs() == [("A", "B")]

    @pytest.mark.parametrize(
        "src,dst,cap,message",
        [
            ("Z", "B", 1, "Start node 'Z' does not exist"),
            ("A", "Z", 1, "End node 'Z' does not exist"),
            ("A", "A", 1, "loop back"),
            ("A", "B", 0, "positive integer"),
            ("A", "B", -4, "positive integer"),
            ("A", "B", 2.5, "positive integer"),
            ("A", "B", "3", "positive integer"),
            ("A", "B", True, "positive integer"),
        ],
    )
    def test_rejected_arcs(self, src, dst, cap, message):
        g = CapacitatedGraph.from_arcs([], nodes=["A", "B"])
        with pytest.raises(GraphValidationError, match=message):
            g.add_arc(src, dst, cap)
        assert g.arcs == {}

    def test_duplicate_pair(self, pipes4):
        with pytest.raises(GraphValidationError, match="from 'A' to 'B' already exists"):
            pipes4.add_arc("A", "B", 1)

    def test_duplicate_arc_id(self, pipes4):
        with pytest.raises(GraphValidationError, match="'ab' is already in use"):
            pipes4.add_arc("D", "A", 1, arc_id="ab")

    def test_remove_arc_frees_pair(self, pipes4):
        pipes4.remove_arc("ab")
        assert pipes4.get_arc("A", "B") is None
        pipes4.add_arc("A", "B", 1)

    def test_saturated_and_reset(self, pipes4):
        pipes4.arcs["bd"].flow = 4
        pipes4.arcs["ab"].flow = 4
        assert [a.id for a in pipes4.saturated_arcs()] == ["bd"]
        assert pipes4.arcs["ab"].residual == 6
        pipes4.reset_flow()
        assert all(a.flow == 0 for a in pipes4.arcs.values())


class TestBatchArcs:
    def test_add_arcs_from_text(self):
        g = CapacitatedGraph.from_arcs([], nodes=["A", "B", "C"])
        arcs = g.add_arcs_from_text("A,B,10\n\n  B , C , 4  \n")
        assert [(a.source, a.target, a.capacity) for a in arcs] == [
            ("A", "B", 10),
            ("B", "C", 4),
        ]
        assert list(g.arcs.values()) == arcs

    def test_errors_are_collected_per_line(self):
        g = CapacitatedGraph.from_arcs([], nodes=["A", "B", "C"])
        text = "A,B,10\nA,B\nA,Z,3\nC,C,1\nB,C,x\nB,C,0\nA,B,2"
        with pytest.raises(GraphValidationError) as exc_info:
            g.add_arcs_from_text(text)
        errors = exc_info.value.errors
        assert len(errors) == 6
        assert errors[0].startswith("line 2: expected 'from,to,capacity'")
        assert errors[1] == "line 3: End node 'Z' does not exist."
        assert errors[2].startswith("line 4:")
        assert errors[3] == "line 5: invalid capacity 'x'"
        assert errors[4].startswith("line 6: Capacity must be a positive integer")
        # duplicate of line 1 inside the same batch
        assert errors[5] == "line 7: An arc from 'A' to 'B' already exists."
        # all or nothing
        assert g.arcs == {}

    def test_batch_rejects_existing_pair(self, pipes4):
        with pytest.raises(GraphValidationError, match="line 1: An arc from 'A' to 'B'"):
            pipes4.add_arcs_from_text("A,B,3")


class TestCopyAndEquality:
    def test_copy_is_deep(self, pipes4):
        clone = pipes4.copy()
        assert clone == pipes4
        clone.arcs["ab"].flow = 5
        clone.nodes["A"].attrs["x"] = 1
        assert pipes4.arcs["ab"].flow == 0
        assert pipes4.nodes["A"].attrs == {}

    def test_copy_keeps_pair_index(self, pipes4):
        clone = pipes4.copy()
        assert clone.get_arc("C", "D").id == "cd"
        with pytest.raises(GraphValidationError):
            clone.add_arc("C", "D", 1)

    def test_direct_construction_builds_pair_index(self):
        g = CapacitatedGraph(
            nodes={"A": Node("A"), "B": Node("B")},
            arcs={"x": Arc("x", "A", "B", 4)},
        )
        assert g.get_arc("A", "B").id == "x"

    def test_from_arcs_node_order(self):
        g = CapacitatedGraph.from_arcs([("B", "C", 1), ("A", "B", 1)], nodes=["D"])
        assert list(g.nodes) == ["D", "B", "C", "A"]


class TestValidate:
    def test_valid_graph(self, pipes4):
        pipes4.validate()

    def test_reports_every_problem(self):
        g = CapacitatedGraph(
            nodes={
                "A": Node("A", role=NodeRole.SOURCE),
                "B": Node("B", role=NodeRole.SOURCE),
            },
            arcs={
                "x": Arc("x", "A", "Z", 3),
                "y": Arc("y", "A", "A", 3),
                "z": Arc("z", "A", "B", 0),
                "w": Arc("w", "A", "B", 2, flow=-1),
            },
        )
        with pytest.raises(GraphValidationError) as exc_info:
            g.validate()
        text = str(exc_info.value)
        assert "More than one source node" in text
        assert "unknown node 'Z'" in text
        assert "self-loop" in text
        assert "capacity must be a positive integer" in text
        assert "flow must be a non-negative integer" in text
        assert "both go from 'A' to 'B'" in text

    def test_non_string_node_id(self):
        g = CapacitatedGraph(nodes={1: Node(1)})
        with pytest.raises(GraphValidationError, match="non-empty string"):
            g.validate()
