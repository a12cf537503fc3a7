"""Configuration for the max-flow engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pipeflow.model.network import CapacitatedGraph


def edmonds_karp_bound(graph: CapacitatedGraph) -> int:
    """Upper bound on augmentations for shortest-path augmentation: V * E."""
    return max(1, len(graph.nodes) * len(graph.arcs))


@dataclass
class MaxFlowConfig:
    """Defaults applied by ``calc_max_flow`` when no keyword overrides them."""

    # Project flow by arc identity instead of by node pair. Only differs from
    # the legacy projection on graphs with anti-parallel arcs.
    strict_antiparallel: bool = False

    # Maximum number of augmenting paths per run; None disables the check.
    max_iterations: Optional[int] = None

    # Use V * E as the iteration bound when max_iterations is None.
    bound_by_graph_size: bool = False

    def resolve_max_iterations(self, graph: CapacitatedGraph) -> Optional[int]:
        """Return the effective iteration limit for ``graph`` (None = unbounded)."""
        if self.max_iterations is not None:
            return self.max_iterations
        if self.bound_by_graph_size:
            return edmonds_karp_bound(graph)
        return None


# Global configuration instance
MAX_FLOW_CONFIG = MaxFlowConfig()
