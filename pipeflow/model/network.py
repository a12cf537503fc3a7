"""Capacitated network model: Node, Arc, NodeRole and CapacitatedGraph.

The graph enforces the contract the max-flow engine relies on: unique node
ids, at most one arc per ordered node pair, no self-loops, and positive
integer capacities. Insertion order of nodes and arcs is preserved and
drives the engine's tie-breaking, so results are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pickle import dumps, loads
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pipeflow.errors import GraphValidationError
from pipeflow.logging import get_logger
from pipeflow.utils.ids import new_arc_id

LOGGER = get_logger(__name__)

NodeID = str
ArcID = str
NodePair = Tuple[NodeID, NodeID]


class NodeRole(str, Enum):
    """Role of a node in a single-source, single-sink flow problem."""

    NORMAL = "normal"
    SOURCE = "source"
    SINK = "sink"


@dataclass
class Node:
    """A junction in the network.

    Attributes:
        id: Unique identifier within the graph.
        role: Normal, source or sink. At most one source and one sink per graph.
        attrs: Opaque metadata such as canvas coordinates (``x``, ``y``).
    """

    id: NodeID
    role: NodeRole = NodeRole.NORMAL
    attrs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Arc:
    """A directed pipe from ``source`` to ``target``.

    Attributes:
        id: Unique arc identifier.
        source: Id of the from-node.
        target: Id of the to-node.
        capacity: Positive integer capacity.
        flow: Flow currently assigned to the arc (0 between runs).
    """

    id: ArcID
    source: NodeID
    target: NodeID
    capacity: int
    flow: int = 0

    @property
    def pair(self) -> NodePair:
        return (self.source, self.target)

    @property
    def residual(self) -> int:
        return self.capacity - self.flow

    @property
    def saturated(self) -> bool:
        return self.flow == self.capacity


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass
class CapacitatedGraph:
    """Nodes plus directed capacity-bearing arcs.

    Attributes:
        nodes: Mapping node id -> Node, in declaration order.
        arcs: Mapping arc id -> Arc, in declaration order.
        attrs: Optional metadata about the network.
    """

    nodes: Dict[NodeID, Node] = field(default_factory=dict)
    arcs: Dict[ArcID, Arc] = field(default_factory=dict)
    attrs: Dict[str, Any] = field(default_factory=dict)
    _pairs: Dict[NodePair, ArcID] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._pairs = {arc.pair: arc_id for arc_id, arc in self.arcs.items()}

    @classmethod
    def from_arcs(
        cls, arcs: Iterable[Sequence[Any]], nodes: Iterable[NodeID] = ()
    ) -> CapacitatedGraph:
        """Build a graph from ``(source, target, capacity[, arc_id])`` rows.

        Nodes listed in ``nodes`` are added first; any other endpoint is added
        the first time an arc mentions it.
        """
        graph = cls()
        for node_id in nodes:
            graph.add_node(node_id)
        for row in arcs:
            src, dst, capacity = row[0], row[1], row[2]
            arc_id = row[3] if len(row) > 3 else None
            for endpoint in (src, dst):
                if endpoint not in graph.nodes:
                    graph.add_node(endpoint)
            graph.add_arc(src, dst, capacity, arc_id=arc_id)
        return graph

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    #
    # Nodes and roles
    #
    def add_node(
        self, node_id: NodeID, role: NodeRole = NodeRole.NORMAL, **attrs: Any
    ) -> Node:
        """Add a node. A source or sink role takes over from its previous holder.

        Raises:
            GraphValidationError: If the id is empty or already used.
        """
        if not isinstance(node_id, str) or not node_id.strip():
            raise GraphValidationError("Node id must be a non-empty string.")
        if node_id in self.nodes:
            raise GraphValidationError(f"Node '{node_id}' already exists.")
        node = Node(id=node_id, attrs=dict(attrs))
        self.nodes[node_id] = node
        role = NodeRole(role)
        if role is not NodeRole.NORMAL:
            self._assign_role(node_id, role)
        return node

    def remove_node(self, node_id: NodeID) -> None:
        """Remove a node and every arc touching it."""
        if node_id not in self.nodes:
            raise GraphValidationError(f"Node '{node_id}' does not exist.")
        for arc_id in [
            a.id for a in self.arcs.values() if node_id in (a.source, a.target)
        ]:
            self.remove_arc(arc_id)
        del self.nodes[node_id]

    def set_source(self, node_id: NodeID) -> None:
        self._assign_role(node_id, NodeRole.SOURCE)

    def set_sink(self, node_id: NodeID) -> None:
        self._assign_role(node_id, NodeRole.SINK)

    def _assign_role(self, node_id: NodeID, role: NodeRole) -> None:
        if node_id not in self.nodes:
            raise GraphValidationError(f"Node '{node_id}' does not exist.")
        for node in self.nodes.values():
            if node.role is role and node.id != node_id:
                LOGGER.debug("Node '%s' is no longer the %s", node.id, role.value)
                node.role = NodeRole.NORMAL
        self.nodes[node_id].role = role

    @property
    def source(self) -> Optional[NodeID]:
        return self._role_holder(NodeRole.SOURCE)

    @property
    def sink(self) -> Optional[NodeID]:
        return self._role_holder(NodeRole.SINK)

    def _role_holder(self, role: NodeRole) -> Optional[NodeID]:
        for node in self.nodes.values():
            if node.role is role:
                return node.id
        return None

    #
    # Arcs
    #
    def _arc_problem(
        self,
        src: NodeID,
        dst: NodeID,
        capacity: Any,
        pending: Iterable[NodePair] = (),
    ) -> Optional[str]:
        """Return why arc src->dst cannot be added, or None if it can."""
        if src not in self.nodes:
            return f"Start node '{src}' does not exist."
        if dst not in self.nodes:
            return f"End node '{dst}' does not exist."
        if src == dst:
            return "An arc cannot loop back onto its own node."
        if not _is_positive_int(capacity):
            return f"Capacity must be a positive integer, got {capacity!r}."
        if (src, dst) in self._pairs or (src, dst) in pending:
            return f"An arc from '{src}' to '{dst}' already exists."
        return None

    def add_arc(
        self,
        source: NodeID,
        target: NodeID,
        capacity: int,
        arc_id: Optional[ArcID] = None,
    ) -> Arc:
        """Add the directed arc ``source -> target``.

        Args:
            source: Existing from-node id.
            target: Existing to-node id.
            capacity: Positive integer capacity.
            arc_id: Optional explicit id; a Base64 UUID is generated otherwise.

        Returns:
            The new Arc, with zero flow.

        Raises:
            GraphValidationError: On unknown endpoints, self-loop, duplicate
                ordered pair, bad capacity, or reused arc id.
        """
        problem = self._arc_problem(source, target, capacity)
        if problem is None and arc_id is not None and arc_id in self.arcs:
            problem = f"Arc id '{arc_id}' is already in use."
        if problem is not None:
            raise GraphValidationError(problem)

        arc = Arc(
            id=arc_id if arc_id is not None else new_arc_id(),
            source=source,
            target=target,
            capacity=capacity,
        )
        self.arcs[arc.id] = arc
        self._pairs[arc.pair] = arc.id
        return arc

    def add_arcs_from_text(self, text: str) -> List[Arc]:
        """Add arcs from lines of ``from,to,capacity``, all or nothing.

        Blank lines are skipped. Every line is checked, including against
        earlier lines of the same batch, before anything is added.

        Raises:
            GraphValidationError: Lists one ``line N: ...`` message per bad line.
        """
        errors: List[str] = []
        accepted: List[Tuple[NodeID, NodeID, int]] = []
        pending: Dict[NodePair, None] = {}

        for lineno, raw in enumerate(text.strip().splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue
            parts = [p.strip() for p in line.split(",")]
            if len(parts) != 3:
                errors.append(
                    f"line {lineno}: expected 'from,to,capacity', got '{line}'"
                )
                continue
            src, dst, cap_text = parts
            try:
                capacity = int(cap_text)
            except ValueError:
                errors.append(f"line {lineno}: invalid capacity '{cap_text}'")
                continue
            problem = self._arc_problem(src, dst, capacity, pending)
            if problem is not None:
                errors.append(f"line {lineno}: {problem}")
                continue
            pending[(src, dst)] = None
            accepted.append((src, dst, capacity))

        if errors:
            raise GraphValidationError(errors)
        return [self.add_arc(src, dst, cap) for src, dst, cap in accepted]

    def remove_arc(self, arc_id: ArcID) -> None:
        if arc_id not in self.arcs:
            raise GraphValidationError(f"Arc '{arc_id}' does not exist.")
        arc = self.arcs.pop(arc_id)
        del self._pairs[arc.pair]

    def get_arc(self, source: NodeID, target: NodeID) -> Optional[Arc]:
        """Return the arc ``source -> target`` if there is one."""
        arc_id = self._pairs.get((source, target))
        return None if arc_id is None else self.arcs[arc_id]

    def antiparallel_pairs(self) -> List[NodePair]:
        """Pairs (u, v) with real arcs in both directions, each listed once."""
        return [
            (u, v) for (u, v) in self._pairs if (v, u) in self._pairs and u < v
        ]

    #
    # Flow state
    #
    def reset_flow(self) -> None:
        for arc in self.arcs.values():
            arc.flow = 0

    def saturated_arcs(self) -> List[Arc]:
        return [arc for arc in self.arcs.values() if arc.saturated]

    def copy(self) -> CapacitatedGraph:
        """Deep copy via pickle; the copy shares nothing with ``self``."""
        return loads(dumps(self))

    def validate(self) -> None:
        """Check the whole graph against the structural contract.

        Used for graphs that were not built through ``add_node``/``add_arc``,
        e.g. ones assembled from a document.

        Raises:
            GraphValidationError: Listing every violation found.
        """
        errors: List[str] = []
        for key, node in self.nodes.items():
            if key != node.id:
                errors.append(f"Node stored under '{key}' has id '{node.id}'.")
            if not isinstance(node.id, str) or not node.id.strip():
                errors.append("Node id must be a non-empty string.")
        for role in (NodeRole.SOURCE, NodeRole.SINK):
            holders = [n.id for n in self.nodes.values() if n.role is role]
            if len(holders) > 1:
                errors.append(f"More than one {role.value} node: {holders}.")

        seen: Dict[NodePair, ArcID] = {}
        for key, arc in self.arcs.items():
            if key != arc.id:
                errors.append(f"Arc stored under '{key}' has id '{arc.id}'.")
            for endpoint in (arc.source, arc.target):
                if endpoint not in self.nodes:
                    errors.append(
                        f"Arc '{arc.id}' references unknown node '{endpoint}'."
                    )
            if arc.source == arc.target:
                errors.append(f"Arc '{arc.id}' is a self-loop on '{arc.source}'.")
            if not _is_positive_int(arc.capacity):
                errors.append(
                    f"Arc '{arc.id}' capacity must be a positive integer, "
                    f"got {arc.capacity!r}."
                )
            if (
                not isinstance(arc.flow, int)
                or isinstance(arc.flow, bool)
                or arc.flow < 0
            ):
                errors.append(
                    f"Arc '{arc.id}' flow must be a non-negative integer, "
                    f"got {arc.flow!r}."
                )
            if arc.pair in seen:
                errors.append(
                    f"Arcs '{seen[arc.pair]}' and '{arc.id}' both go from "
                    f"'{arc.source}' to '{arc.target}'."
                )
            else:
                seen[arc.pair] = arc.id

        if errors:
            raise GraphValidationError(errors)
