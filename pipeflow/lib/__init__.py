"""Library utilities for pipeflow.

This package contains integration modules for external libraries.
"""

from pipeflow.lib.nx import from_networkx, to_networkx

__all__ = ["from_networkx", "to_networkx"]
