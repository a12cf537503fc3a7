"""Network data model used by the max-flow engine."""

from pipeflow.model.network import Arc, CapacitatedGraph, Node, NodeRole

__all__ = ["Arc", "CapacitatedGraph", "Node", "NodeRole"]
