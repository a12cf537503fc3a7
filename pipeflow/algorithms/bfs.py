from __future__ import annotations

from collections import deque
from typing import Dict, Optional

from pipeflow.algorithms.types import NodePath, ResidualNetwork
from pipeflow.model.network import NodeID


def find_augmenting_path(
    residual: ResidualNetwork,
    src_node: NodeID,
    dst_node: NodeID,
) -> Optional[NodePath]:
    """
    Breadth-first search for the fewest-hop path with positive residual capacity.

    Each node is enqueued at most once and remembers the first node that
    discovered it. Neighbors are scanned in the residual map's insertion
    order, which fixes the choice among equally short paths.

    Args:
        residual: Residual capacities; not modified.
        src_node: Node the search starts from.
        dst_node: Node the search is looking for.

    Returns:
        Node ids from ``src_node`` to ``dst_node``, or None if ``dst_node``
        cannot be reached over positive-residual edges.
    """
    pred: Dict[NodeID, NodeID] = {}
    visited = {src_node}
    queue = deque([src_node])

    while queue:
        node_id = queue.popleft()
        if node_id == dst_node:
            path = [dst_node]
            while path[-1] != src_node:
                path.append(pred[path[-1]])
            path.reverse()
            return tuple(path)

        for neighbor_id, capacity in residual[node_id].items():
            if neighbor_id not in visited and capacity > 0:
                visited.add(neighbor_id)
                pred[neighbor_id] = node_id
                queue.append(neighbor_id)

    return None
