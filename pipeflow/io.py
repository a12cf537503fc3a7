"""Reading and writing network documents.

A network document is the graph plus the chosen source and sink::

    {
      "graph": {
        "nodes": [{"id": "A", "type": "source", "x": 120, "y": 80}, ...],
        "edges": [{"id": "...", "from": "A", "to": "B", "capacity": 10, "flow": 0}, ...]
      },
      "source": "A",
      "sink": "D",
      "timestamp": "2024-01-01T00:00:00+00:00"
    }

Node keys other than ``id`` and ``type`` are kept as node attributes.
JSON is the default format; ``.yaml``/``.yml`` files go through PyYAML.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Union

import yaml

from pipeflow.errors import GraphValidationError, NetworkFormatError
from pipeflow.logging import get_logger
from pipeflow.model.network import Arc, CapacitatedGraph, Node, NodeID, NodeRole
from pipeflow.utils.ids import new_arc_id

if TYPE_CHECKING:
    from pipeflow.algorithms.types import FlowResult

LOGGER = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")

Document = Tuple[CapacitatedGraph, Optional[NodeID], Optional[NodeID]]


def graph_to_dict(graph: CapacitatedGraph) -> Dict[str, Any]:
    """Return the ``{"nodes": [...], "edges": [...]}`` form of ``graph``."""
    return {
        "nodes": [
            {"id": node.id, "type": node.role.value, **node.attrs}
            for node in graph.nodes.values()
        ],
        "edges": [
            {
                "id": arc.id,
                "from": arc.source,
                "to": arc.target,
                "capacity": arc.capacity,
                "flow": arc.flow,
            }
            for arc in graph.arcs.values()
        ],
    }


def _as_int(value: Any) -> Any:
    # JSON tools often write 10 as 10.0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _text_id(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise NetworkFormatError(f"{what} must be a non-empty string, got {value!r}")
    return value


def graph_from_dict(data: Dict[str, Any]) -> CapacitatedGraph:
    """Build and validate a graph from its ``{"nodes", "edges"}`` form.

    Raises:
        NetworkFormatError: If entries are missing fields or break the
            graph contract.
    """
    if not isinstance(data, dict):
        raise NetworkFormatError("'graph' must be a mapping")
    raw_nodes = data.get("nodes")
    raw_edges = data.get("edges")
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise NetworkFormatError("'graph' needs 'nodes' and 'edges' lists")

    nodes: Dict[NodeID, Node] = {}
    for i, entry in enumerate(raw_nodes):
        if not isinstance(entry, dict) or "id" not in entry:
            raise NetworkFormatError(f"node #{i} has no 'id'")
        node_id = _text_id(entry["id"], f"node #{i} id")
        attrs = {k: v for k, v in entry.items() if k not in ("id", "type")}
        try:
            role = NodeRole(entry.get("type", NodeRole.NORMAL.value))
        except ValueError:
            raise NetworkFormatError(
                f"node '{node_id}' has unknown type {entry.get('type')!r}"
            ) from None
        if node_id in nodes:
            raise NetworkFormatError(f"node '{node_id}' is listed twice")
        nodes[node_id] = Node(id=node_id, role=role, attrs=attrs)

    arcs: Dict[str, Arc] = {}
    for i, entry in enumerate(raw_edges):
        if not isinstance(entry, dict):
            raise NetworkFormatError(f"edge #{i} is not a mapping")
        missing = [k for k in ("from", "to", "capacity") if k not in entry]
        if missing:
            raise NetworkFormatError(f"edge #{i} is missing {', '.join(missing)}")
        arc_id = entry.get("id") or new_arc_id()
        _text_id(arc_id, f"edge #{i} id")
        if arc_id in arcs:
            raise NetworkFormatError(f"edge id '{arc_id}' is listed twice")
        arcs[arc_id] = Arc(
            id=arc_id,
            source=_text_id(entry["from"], f"edge #{i} 'from'"),
            target=_text_id(entry["to"], f"edge #{i} 'to'"),
            capacity=_as_int(entry["capacity"]),
            flow=_as_int(entry.get("flow", 0)),
        )

    graph = CapacitatedGraph(nodes=nodes, arcs=arcs)
    try:
        graph.validate()
    except GraphValidationError as exc:
        raise NetworkFormatError("; ".join(exc.errors)) from exc
    return graph


def network_to_dict(
    graph: CapacitatedGraph,
    source: Optional[NodeID] = None,
    sink: Optional[NodeID] = None,
) -> Dict[str, Any]:
    """Full network document. Source/sink default to the graph's role holders."""
    return {
        "graph": graph_to_dict(graph),
        "source": source if source is not None else graph.source or "",
        "sink": sink if sink is not None else graph.sink or "",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def network_from_dict(data: Dict[str, Any]) -> Document:
    """Parse a network document into ``(graph, source, sink)``.

    An empty or absent ``source``/``sink`` falls back to the node tagged with
    that role; a named one is tagged on the returned graph.

    Raises:
        NetworkFormatError: On malformed documents or unknown source/sink ids.
    """
    if not isinstance(data, dict) or "graph" not in data:
        raise NetworkFormatError("document has no 'graph' section")
    graph = graph_from_dict(data["graph"])

    source = data.get("source") or None
    sink = data.get("sink") or None
    for label, node_id, assign in (
        ("source", source, graph.set_source),
        ("sink", sink, graph.set_sink),
    ):
        if node_id is None:
            continue
        _text_id(node_id, label)
        if node_id not in graph.nodes:
            raise NetworkFormatError(f"{label} '{node_id}' is not a node of the graph")
        assign(node_id)

    return graph, source or graph.source, sink or graph.sink


def load_network(path: Union[str, Path]) -> Document:
    """Read a network document from a JSON or YAML file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise NetworkFormatError(f"cannot parse document: {exc}", str(path)) from exc

    try:
        document = network_from_dict(data)
    except NetworkFormatError as exc:
        raise NetworkFormatError(str(exc), str(path)) from exc

    graph = document[0]
    LOGGER.debug(
        "Loaded %s: %d nodes, %d arcs", path, len(graph.nodes), len(graph.arcs)
    )
    return document


def save_network(
    path: Union[str, Path],
    graph: CapacitatedGraph,
    source: Optional[NodeID] = None,
    sink: Optional[NodeID] = None,
) -> Path:
    """Write a network document; the format follows the file suffix."""
    path = Path(path)
    data = network_to_dict(graph, source, sink)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(data, sort_keys=False)
    else:
        text = json.dumps(data, indent=2)
    path.write_text(text, encoding="utf-8")
    LOGGER.debug("Saved network to %s", path)
    return path


def result_to_json(result: FlowResult, indent: Optional[int] = 2) -> str:
    return json.dumps(result.to_dict(), indent=indent)
