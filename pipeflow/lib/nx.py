"""NetworkX conversion utilities.

Example:
    >>> import networkx as nx
    >>> from pipeflow.lib.nx import from_networkx, to_networkx
    >>>
    >>> G = nx.DiGraph()
    >>> G.add_edge("A", "B", capacity=10)
    >>> G.add_edge("B", "C", capacity=5)
    >>> graph = from_networkx(G)
    >>>
    >>> # ... run calc_max_flow(graph, "A", "C") ...
    >>>
    >>> G_out = to_networkx(result.final_graph)
    >>> G_out["A"]["B"]["flow"]
    5
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from pipeflow.errors import GraphValidationError
from pipeflow.model.network import CapacitatedGraph, NodeRole

if TYPE_CHECKING:
    import networkx as nx

    NxGraph = Union[nx.DiGraph, nx.Graph]
else:
    NxGraph = Any


def to_networkx(
    graph: CapacitatedGraph,
    *,
    capacity_attr: str = "capacity",
    flow_attr: str = "flow",
) -> "nx.DiGraph":
    """Convert a CapacitatedGraph into a ``networkx.DiGraph``.

    Node order and arc order are preserved. Nodes carry ``role`` plus their
    attrs; edges carry capacity, flow and the arc ``id``.

    Args:
        graph: Graph to convert.
        capacity_attr: Edge attribute name for capacity (default: "capacity").
        flow_attr: Edge attribute name for flow (default: "flow").

    Returns:
        nx.DiGraph mirroring ``graph``.
    """
    import networkx as nx

    G = nx.DiGraph()
    for node in graph.nodes.values():
        G.add_node(node.id, role=node.role.value, **node.attrs)
    for arc in graph.arcs.values():
        G.add_edge(
            arc.source,
            arc.target,
            id=arc.id,
            **{capacity_attr: arc.capacity, flow_attr: arc.flow},
        )
    return G


def from_networkx(
    G: NxGraph,
    *,
    capacity_attr: str = "capacity",
    default_capacity: int = 1,
) -> CapacitatedGraph:
    """Convert a NetworkX DiGraph into a CapacitatedGraph.

    Node names are turned into strings. An undirected ``nx.Graph`` becomes a
    pair of opposite arcs per edge.

    Args:
        G: ``nx.DiGraph`` or ``nx.Graph``.
        capacity_attr: Edge attribute holding capacity (default: "capacity").
        default_capacity: Capacity used when the attribute is missing.

    Returns:
        A new CapacitatedGraph with zero flow.

    Raises:
        TypeError: If ``G`` is not a NetworkX graph, or is a multigraph.
        GraphValidationError: On self-loops or non-integer capacities.
    """
    import networkx as nx

    if isinstance(G, (nx.MultiDiGraph, nx.MultiGraph)):
        raise TypeError("Multigraphs cannot be converted: parallel arcs are not supported")
    if not isinstance(G, (nx.DiGraph, nx.Graph)):
        raise TypeError(f"Expected a NetworkX DiGraph or Graph, got {type(G).__name__}")

    graph = CapacitatedGraph()
    for name, data in G.nodes(data=True):
        attrs = {k: v for k, v in data.items() if k != "role"}
        graph.add_node(str(name), **attrs)
        role = data.get("role")
        if role == NodeRole.SOURCE.value:
            graph.set_source(str(name))
        elif role == NodeRole.SINK.value:
            graph.set_sink(str(name))

    edges = list(G.edges(data=True))
    if not G.is_directed():
        edges += [(v, u, d) for u, v, d in edges]

    for u, v, data in edges:
        if u == v:
            raise GraphValidationError(f"Self-loop on '{u}' cannot be converted.")
        capacity = data.get(capacity_attr, default_capacity)
        if isinstance(capacity, float) and capacity.is_integer():
            capacity = int(capacity)
        arc_id = data.get("id") if G.is_directed() else None
        graph.add_arc(str(u), str(v), capacity, arc_id=arc_id)

    return graph
