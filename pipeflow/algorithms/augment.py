"""Bottleneck computation, residual update and flow projection for one augmentation."""

from __future__ import annotations

from typing import Dict, Iterator, Sequence, Tuple

from pipeflow.algorithms.types import ResidualNetwork
from pipeflow.errors import InternalConsistencyError
from pipeflow.model.network import Arc, NodeID, NodePair


def _steps(path: Sequence[NodeID]) -> Iterator[Tuple[NodeID, NodeID]]:
    return zip(path, path[1:])


def path_bottleneck(residual: ResidualNetwork, path: Sequence[NodeID]) -> int:
    """Return the smallest residual capacity along ``path``.

    Raises:
        InternalConsistencyError: If the path has fewer than two nodes, or a
            step has no residual entry, or the minimum is not positive.
    """
    if len(path) < 2:
        raise InternalConsistencyError(
            f"Augmenting path needs at least two nodes, got {list(path)}"
        )

    bottleneck = None
    for u, v in _steps(path):
        try:
            capacity = residual[u][v]
        except KeyError:
            raise InternalConsistencyError(
                f"No residual edge {u} -> {v} for path {list(path)}"
            ) from None
        if bottleneck is None or capacity < bottleneck:
            bottleneck = capacity

    if bottleneck is None or bottleneck <= 0:
        raise InternalConsistencyError(
            f"Path {list(path)} has no positive bottleneck ({bottleneck})"
        )
    return bottleneck


def apply_residual_update(
    residual: ResidualNetwork, path: Sequence[NodeID], amount: int
) -> None:
    """Push ``amount`` along ``path``: forward residuals shrink, reverse ones grow."""
    for u, v in _steps(path):
        residual[u][v] -= amount
        residual[v][u] += amount


def project_flow(
    arc_index: Dict[NodePair, Arc],
    path: Sequence[NodeID],
    amount: int,
    *,
    strict: bool = False,
) -> None:
    """
    Record an augmentation of ``amount`` on the arcs of the working graph.

    Default mode, per step ``u -> v``:
      - if the arc ``u -> v`` exists, its flow grows by ``amount``;
      - otherwise the step cancels flow on the arc ``v -> u``, whose flow
        shrinks by ``amount`` (never below zero).

    Strict mode keeps arc identities apart when both ``u -> v`` and
    ``v -> u`` exist: it first cancels up to ``amount`` of the flow on
    ``v -> u`` and pushes only the remainder onto ``u -> v``. On graphs
    without anti-parallel arcs both modes give the same flows.

    Args:
        arc_index: Ordered node pair -> arc of the working graph.
        path: Augmenting path.
        amount: Bottleneck pushed along the path.
        strict: Use arc-identity accounting.

    Raises:
        InternalConsistencyError: If a step matches no arc in either direction.
    """
    for u, v in _steps(path):
        forward = arc_index.get((u, v))
        backward = arc_index.get((v, u))
        if forward is None and backward is None:
            raise InternalConsistencyError(f"No arc between {u} and {v}")

        if not strict:
            if forward is not None:
                forward.flow += amount
            else:
                backward.flow = max(0, backward.flow - amount)
            continue

        remaining = amount
        if backward is not None:
            cancelled = min(backward.flow, remaining)
            backward.flow -= cancelled
            remaining -= cancelled
        if remaining:
            if forward is None:
                raise InternalConsistencyError(
                    f"Cannot push {remaining} on missing arc {u} -> {v}"
                )
            forward.flow += remaining
