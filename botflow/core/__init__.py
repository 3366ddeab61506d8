"""Core data structures for botflow flow graphs."""

from .errors import FlowGraphError, UnknownVariableError
from .ir import Locator, Variable, Step, Block, Edge, FlowGraph
from .serialization import JsonSerializer

__all__ = [
    "FlowGraphError",
    "UnknownVariableError",
    "Locator",
    "Variable",
    "Step",
    "Block",
    "Edge",
    "FlowGraph",
    "JsonSerializer",
]
