"""
botflow frontend modules for authoring flow graphs.

- FlowGraphBuilder: Imperative API for manual graph construction
"""

from .builder import FlowGraphBuilder

__all__ = [
    "FlowGraphBuilder",
]
