"""pipeflow: maximum flow through capacitated pipe networks.

Builds a directed network of nodes and capacity-bearing arcs and computes the
maximum flow between a source and a sink with the Edmonds-Karp method,
keeping every augmenting path for inspection.

Primary API:
    CapacitatedGraph, Node, Arc, NodeRole - network model with edit validation
    calc_max_flow() - run the engine, returns a FlowResult
    load_network(), save_network() - JSON/YAML network documents

Example:
    from pipeflow import CapacitatedGraph, calc_max_flow

    g = CapacitatedGraph()
    for name in "ABCD":
        g.add_node(name)
    g.add_arcs_from_text("A,B,10\\nA,C,10\\nB,C,2\\nB,D,4\\nC,D,9")

    result = calc_max_flow(g, "A", "D")
    result.max_flow        # 13
    result.paths[0].path   # ('A', 'B', 'D')
"""

from __future__ import annotations

from pipeflow import cli, logging
from pipeflow.algorithms.max_flow import calc_max_flow, max_flow_value, saturated_arcs
from pipeflow.algorithms.types import AugmentingPath, FlowResult
from pipeflow.config import MAX_FLOW_CONFIG, MaxFlowConfig, edmonds_karp_bound
from pipeflow.errors import (
    DegenerateFlowError,
    GraphStructureError,
    GraphValidationError,
    InternalConsistencyError,
    IterationLimitError,
    NetworkFormatError,
    NodeNotFoundError,
    PipeflowError,
    StructuralError,
)
from pipeflow.io import load_network, network_from_dict, network_to_dict, save_network
from pipeflow.lib.nx import from_networkx, to_networkx
from pipeflow.model.network import Arc, CapacitatedGraph, Node, NodeRole

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Model
    "Arc",
    "CapacitatedGraph",
    "Node",
    "NodeRole",
    # Engine
    "calc_max_flow",
    "max_flow_value",
    "saturated_arcs",
    "AugmentingPath",
    "FlowResult",
    # Configuration
    "MaxFlowConfig",
    "MAX_FLOW_CONFIG",
    "edmonds_karp_bound",
    # Errors
    "PipeflowError",
    "StructuralError",
    "NodeNotFoundError",
    "DegenerateFlowError",
    "GraphStructureError",
    "GraphValidationError",
    "InternalConsistencyError",
    "IterationLimitError",
    "NetworkFormatError",
    # Documents
    "load_network",
    "save_network",
    "network_from_dict",
    "network_to_dict",
    # Library integrations (NetworkX)
    "from_networkx",
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]
