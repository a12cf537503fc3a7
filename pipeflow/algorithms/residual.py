from __future__ import annotations

from typing import Dict

from pipeflow.algorithms.types import ResidualNetwork
from pipeflow.errors import GraphStructureError
from pipeflow.model.network import Arc, CapacitatedGraph, NodePair


def build_residual_network(graph: CapacitatedGraph) -> ResidualNetwork:
    """
    Build the residual capacity map for a zero-flow run over ``graph``.

    Every node gets a neighbor map (in node order). Every arc ``u -> v`` with
    capacity ``c`` then sets ``residual[u][v] = c`` and, unless ``residual[v]``
    already has an entry for ``u``, adds the synthetic reverse edge
    ``residual[v][u] = 0``. The reverse edge only carries capacity for
    cancelling flow pushed on ``u -> v``.

    When ``v -> u`` is itself a real arc its capacity is stored in the same
    slot, so that slot also serves as the undo channel for ``u -> v``.

    Args:
        graph: The capacitated graph. Arc flows are ignored.

    Returns:
        A fresh ResidualNetwork owned by the caller.

    Raises:
        GraphStructureError: If an arc references a node that is not in the graph.
    """
    residual: ResidualNetwork = {node_id: {} for node_id in graph.nodes}

    for arc in graph.arcs.values():
        if arc.source not in residual or arc.target not in residual:
            missing = arc.source if arc.source not in residual else arc.target
            raise GraphStructureError(
                f"Arc '{arc.id}' references unknown node '{missing}'"
            )
        residual[arc.source][arc.target] = arc.capacity
        residual[arc.target].setdefault(arc.source, 0)

    return residual


def build_arc_index(graph: CapacitatedGraph) -> Dict[NodePair, Arc]:
    """Map each ordered ``(source, target)`` pair to its arc in ``graph``."""
    return {arc.pair: arc for arc in graph.arcs.values()}
