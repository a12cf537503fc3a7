"""Types and data structures for max-flow results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

from pipeflow.io import graph_to_dict
from pipeflow.model.network import ArcID, CapacitatedGraph, NodeID

#: Residual capacities: node id -> neighbor id -> remaining capacity.
#: Neighbor order is insertion order and decides BFS tie-breaks.
ResidualNetwork = Dict[NodeID, Dict[NodeID, int]]

#: Ordered node ids from source to sink.
NodePath = Tuple[NodeID, ...]


@dataclass(frozen=True)
class AugmentingPath:
    """One augmentation: the path used and the flow pushed along it."""

    path: NodePath
    bottleneck: int

    def __str__(self) -> str:
        return f"{' -> '.join(self.path)} ({self.bottleneck})"

    def to_dict(self) -> Dict[str, Any]:
        return {"path": list(self.path), "bottleneck": self.bottleneck}


@dataclass(frozen=True)
class FlowResult:
    """Outcome of one max-flow run.

    Attributes:
        max_flow: Total flow value, the sum of all bottlenecks.
        paths: Augmenting paths in discovery order.
        final_graph: Copy of the input graph with each arc's flow set.
        source: Source node id of the run.
        sink: Sink node id of the run.
        reachable: Nodes reachable from the source in the final residual
            network, i.e. the source side of a minimum cut.
        min_cut: Ids of arcs going from ``reachable`` to the rest, in arc order.
    """

    max_flow: int
    paths: Tuple[AugmentingPath, ...]
    final_graph: CapacitatedGraph
    source: NodeID
    sink: NodeID
    reachable: FrozenSet[NodeID] = field(default_factory=frozenset)
    min_cut: Tuple[ArcID, ...] = ()

    @property
    def iterations(self) -> int:
        return len(self.paths)

    @property
    def min_cut_capacity(self) -> int:
        return sum(self.final_graph.arcs[a].capacity for a in self.min_cut)

    def arc_flows(self) -> Dict[Tuple[NodeID, NodeID], int]:
        """Flow per ordered node pair, in arc declaration order."""
        return {arc.pair: arc.flow for arc in self.final_graph.arcs.values()}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the ``maxFlow``/``paths``/``finalGraph`` field names."""
        return {
            "maxFlow": self.max_flow,
            "paths": [p.to_dict() for p in self.paths],
            "finalGraph": graph_to_dict(self.final_graph),
            "source": self.source,
            "sink": self.sink,
            "minCut": list(self.min_cut),
        }
