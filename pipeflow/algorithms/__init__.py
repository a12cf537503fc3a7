"""Edmonds-Karp max-flow engine."""

from pipeflow.algorithms.augment import (
    apply_residual_update,
    path_bottleneck,
    project_flow,
)
from pipeflow.algorithms.bfs import find_augmenting_path
from pipeflow.algorithms.max_flow import calc_max_flow, max_flow_value, saturated_arcs
from pipeflow.algorithms.residual import build_arc_index, build_residual_network
from pipeflow.algorithms.types import AugmentingPath, FlowResult, ResidualNetwork

__all__ = [
    "AugmentingPath",
    "FlowResult",
    "ResidualNetwork",
    "apply_residual_update",
    "build_arc_index",
    "build_residual_network",
    "calc_max_flow",
    "find_augmenting_path",
    "max_flow_value",
    "path_bottleneck",
    "project_flow",
    "saturated_arcs",
]
