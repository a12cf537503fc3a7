"""Tests for NetworkX conversion utilities."""

import networkx as nx
import pytest

from pipeflow.algorithms.max_flow import calc_max_flow
from pipeflow.errors import GraphValidationError
from pipeflow.lib.nx import from_networkx, to_networkx
from pipeflow.model.network import NodeRole


class TestToNetworkx:
    def test_structure_and_attributes(self, pipes4):
        pipes4.set_source("A")
        pipes4.nodes["B"].attrs["x"] = 3
        G = to_networkx(pipes4)
        assert isinstance(G, nx.DiGraph)
        assert list(G.nodes) == ["A", "B", "C", "D"]
        assert G.nodes["A"]["role"] == "source"
        assert G.nodes["B"] == {"role": "normal", "x": 3}
        assert G["A"]["B"] == {"id": "ab", "capacity": 10, "flow": 0}
        assert G.number_of_edges() == 5

    def test_flows_of_result(self, pipes4):
        result = calc_max_flow(pipes4, "A", "D")
        G = to_networkx(result.final_graph, flow_attr="f")
        assert G["C"]["D"]["f"] == 9

    def test_networkx_agrees_on_value(self, clrs6):
        G = to_networkx(clrs6)
        assert nx.maximum_flow_value(G, "s", "t") == calc_max_flow(clrs6, "s", "t").max_flow


class TestFromNetworkx:
    def test_digraph(self):
        G = nx.DiGraph()
        G.add_node("S", role="source")
        G.add_edge("S", "A", capacity=4, id="sa")
        G.add_edge("A", "T", capacity=3.0)
        g = from_networkx(G)
        assert list(g.nodes) == ["S", "A", "T"]
        assert g.source == "S"
        assert g.arcs["sa"].capacity == 4
        assert g.get_arc("A", "T").capacity == 3
        assert calc_max_flow(g, "S", "T").max_flow == 3

    def test_default_capacity_and_string_names(self):
        G = nx.DiGraph()
        G.add_edge(1, 2)
        g = from_networkx(G, default_capacity=6)
        assert g.get_arc("1", "2").capacity == 6

    def test_undirected_graph_gives_both_directions(self):
        G = nx.Graph()
        G.add_edge("A", "B", capacity=2, id="ignored")
        g = from_networkx(G)
        assert g.get_arc("A", "B").capacity == 2
        assert g.get_arc("B", "A").capacity == 2
        assert g.nodes["A"].role is NodeRole.NORMAL

    @pytest.mark.parametrize("graph_type", [nx.MultiDiGraph, nx.MultiGraph])
    def test_multigraphs_rejected(self, graph_type):
        with pytest.raises(TypeError, match="parallel arcs"):
            from_networkx(graph_type())

    def test_not_a_graph(self):
        with pytest.raises(TypeError, match="got dict"):
            from_networkx({})

    def test_self_loop_rejected(self):
        G = nx.DiGraph()
        G.add_edge("A", "A", capacity=1)
        with pytest.raises(GraphValidationError, match="Self-loop"):
            from_networkx(G)

    def test_round_trip(self, pipes4):
        assert from_networkx(to_networkx(pipes4)) == pipes4
