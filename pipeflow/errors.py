"""Exception hierarchy for pipeflow.

Structural and validation errors also derive from ``ValueError`` and the
fatal ones from ``RuntimeError``, so callers that only know the builtin
types can still catch them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class PipeflowError(Exception):
    """Base class for all pipeflow errors."""


class StructuralError(PipeflowError, ValueError):
    """The source/sink request cannot be evaluated on this graph."""


class NodeNotFoundError(StructuralError):
    """Source or sink id does not name a node of the graph."""

    def __init__(self, node_id: str, role: str = "node") -> None:
        self.node_id = node_id
        self.role = role
        super().__init__(f"{role.capitalize()} node '{node_id}' is not in the graph")


class DegenerateFlowError(StructuralError):
    """Source and sink are the same node."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(
            f"Source and sink are both '{node_id}'; max flow is undefined"
        )


class GraphStructureError(PipeflowError, ValueError):
    """The graph handed to the engine breaks its structural contract."""


class InternalConsistencyError(PipeflowError, RuntimeError):
    """Residual state and augmenting path disagree. Indicates a defect."""


class IterationLimitError(PipeflowError, RuntimeError):
    """The run needed more augmentations than the caller allowed."""

    def __init__(self, limit: int, flow_so_far: int) -> None:
        self.limit = limit
        self.flow_so_far = flow_so_far
        super().__init__(
            f"Iteration limit of {limit} augmentations reached "
            f"(flow so far: {flow_so_far})"
        )


class GraphValidationError(PipeflowError, ValueError):
    """An edit to a CapacitatedGraph was rejected.

    Attributes:
        errors: One message per rejected item; a single edit yields one entry.
    """

    def __init__(self, errors: Iterable[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__("\n".join(self.errors))


class NetworkFormatError(PipeflowError, ValueError):
    """A network document could not be parsed into a graph."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
