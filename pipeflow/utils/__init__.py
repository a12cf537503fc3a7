"""Small helpers shared across pipeflow modules."""

from pipeflow.utils.ids import new_arc_id

__all__ = ["new_arc_id"]
