from __future__ import annotations

from collections import deque
from typing import FrozenSet, List, Optional, Tuple

from pipeflow.algorithms.augment import (
    apply_residual_update,
    path_bottleneck,
    project_flow,
)
from pipeflow.algorithms.bfs import find_augmenting_path
from pipeflow.algorithms.residual import build_arc_index, build_residual_network
from pipeflow.algorithms.types import AugmentingPath, FlowResult, ResidualNetwork
from pipeflow.config import MAX_FLOW_CONFIG, MaxFlowConfig
from pipeflow.errors import (
    DegenerateFlowError,
    IterationLimitError,
    NodeNotFoundError,
)
from pipeflow.logging import get_logger
from pipeflow.model.network import ArcID, CapacitatedGraph, NodeID

LOGGER = get_logger(__name__)


def calc_max_flow(
    graph: CapacitatedGraph,
    src_node: NodeID,
    dst_node: NodeID,
    *,
    strict: Optional[bool] = None,
    max_iterations: Optional[int] = None,
    config: Optional[MaxFlowConfig] = None,
) -> FlowResult:
    """Compute the maximum flow from ``src_node`` to ``dst_node``.

    Edmonds-Karp: starting from zero flow on a private copy of ``graph``,
    repeatedly
      1. finds the fewest-hop path with positive residual capacity
         (``find_augmenting_path``),
      2. takes its bottleneck (``path_bottleneck``),
      3. updates the residual network (``apply_residual_update``),
      4. records the flow on the copied arcs (``project_flow``),
    until no augmenting path remains.

    Args:
        graph: The capacitated graph. It is never modified.
        src_node: Source node id.
        dst_node: Sink node id.
        strict: Project flow by arc identity (see ``project_flow``). Defaults
            to ``config.strict_antiparallel``.
        max_iterations: Maximum number of augmentations. Defaults to
            ``config.resolve_max_iterations(graph)``.
        config: Engine defaults. Defaults to ``MAX_FLOW_CONFIG``.

    Returns:
        FlowResult with the flow value, augmenting paths in discovery order,
        the annotated graph copy and the minimum cut found.

    Raises:
        NodeNotFoundError: If either id is not a node of ``graph``.
        DegenerateFlowError: If ``src_node == dst_node``.
        IterationLimitError: If more than ``max_iterations`` augmentations
            would be needed.

    Examples:
        >>> g = CapacitatedGraph.from_arcs([("A", "B", 10), ("B", "C", 5)])
        >>> calc_max_flow(g, "A", "C").max_flow
        5
    """
    if src_node not in graph.nodes:
        raise NodeNotFoundError(src_node, "source")
    if dst_node not in graph.nodes:
        raise NodeNotFoundError(dst_node, "sink")
    if src_node == dst_node:
        raise DegenerateFlowError(src_node)

    config = config or MAX_FLOW_CONFIG
    if strict is None:
        strict = config.strict_antiparallel
    if max_iterations is None:
        max_iterations = config.resolve_max_iterations(graph)

    flow_graph = graph.copy()
    flow_graph.reset_flow()
    residual = build_residual_network(flow_graph)
    arc_index = build_arc_index(flow_graph)

    if not strict:
        antiparallel = flow_graph.antiparallel_pairs()
        if antiparallel:
            LOGGER.warning(
                "Graph has %d anti-parallel arc pair(s), e.g. %s; reported arc "
                "flows may exceed capacity. Use strict=True for per-arc accounting.",
                len(antiparallel),
                antiparallel[0],
            )

    paths: List[AugmentingPath] = []
    max_flow = 0

    while True:
        path = find_augmenting_path(residual, src_node, dst_node)
        if path is None:
            break
        if max_iterations is not None and len(paths) >= max_iterations:
            raise IterationLimitError(max_iterations, max_flow)

        bottleneck = path_bottleneck(residual, path)
        apply_residual_update(residual, path, bottleneck)
        project_flow(arc_index, path, bottleneck, strict=strict)

        paths.append(AugmentingPath(path=path, bottleneck=bottleneck))
        max_flow += bottleneck
        LOGGER.debug(
            "Augmentation %d: %s carries %d (total %d)",
            len(paths),
            " -> ".join(path),
            bottleneck,
            max_flow,
        )

    reachable, min_cut = _residual_cut(residual, flow_graph, src_node)
    LOGGER.debug(
        "Max flow %s -> %s = %d after %d augmentation(s)",
        src_node,
        dst_node,
        max_flow,
        len(paths),
    )

    return FlowResult(
        max_flow=max_flow,
        paths=tuple(paths),
        final_graph=flow_graph,
        source=src_node,
        sink=dst_node,
        reachable=reachable,
        min_cut=min_cut,
    )


def _residual_cut(
    residual: ResidualNetwork, flow_graph: CapacitatedGraph, src_node: NodeID
) -> Tuple[FrozenSet[NodeID], Tuple[ArcID, ...]]:
    """Source side of the final residual network and the arcs leaving it."""
    reachable = {src_node}
    queue = deque([src_node])
    while queue:
        node_id = queue.popleft()
        for neighbor_id, capacity in residual[node_id].items():
            if capacity > 0 and neighbor_id not in reachable:
                reachable.add(neighbor_id)
                queue.append(neighbor_id)

    min_cut = tuple(
        arc.id
        for arc in flow_graph.arcs.values()
        if arc.source in reachable and arc.target not in reachable
    )
    return frozenset(reachable), min_cut


def max_flow_value(graph: CapacitatedGraph, src_node: NodeID, dst_node: NodeID) -> int:
    """Shortcut returning only the flow value."""
    return calc_max_flow(graph, src_node, dst_node).max_flow


def saturated_arcs(
    graph: CapacitatedGraph, src_node: NodeID, dst_node: NodeID, **kwargs
) -> List[ArcID]:
    """Ids of arcs carrying flow equal to their capacity in the max-flow solution.

    Args:
        graph: The graph to analyze.
        src_node: Source node.
        dst_node: Sink node.
        **kwargs: Passed through to ``calc_max_flow``.
    """
    result = calc_max_flow(graph, src_node, dst_node, **kwargs)
    return [arc.id for arc in result.final_graph.saturated_arcs()]
