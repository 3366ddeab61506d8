"""
botflow - A conversational-flow execution engine.

A flow graph is a set of blocks (ordered steps) linked by edges. A
ConversationSession walks that graph one advance at a time, recording the
blocks it shows and handing control between linked graphs.

Main APIs:
- FlowGraphBuilder: Imperative API for authoring flow graphs
- JsonSerializer: Load and save flow graphs as JSON
- ConversationSession: Traversal state for one conversation
- AutoPlayer: Headless driver that executes steps and advances a session

Backends:
- MermaidExporter: Mermaid.js diagram syntax
- GraphvizExporter: Graphviz DOT format
- SvgExporter: SVG format (requires Graphviz)
"""

from botflow.core.errors import FlowGraphError, UnknownVariableError
from botflow.core.ir import FlowGraph, Block, Step, Edge, Locator, Variable
from botflow.core.serialization import JsonSerializer
from botflow.engine import (
    AutoPlayer,
    CallbackSink,
    ConversationSession,
    ContinuationQueue,
    DisplayedEntry,
    EngineState,
    NotificationSink,
    RecordingSink,
    TraversalEngine,
    VariableStore,
    VisibleHistory,
)
from botflow.frontend import FlowGraphBuilder
from botflow.backend import MermaidExporter, GraphvizExporter, SvgExporter

__all__ = [
    # Core IR
    "FlowGraph",
    "Block",
    "Step",
    "Edge",
    "Locator",
    "Variable",
    "FlowGraphError",
    "UnknownVariableError",
    # Serialization
    "JsonSerializer",
    # Engine
    "AutoPlayer",
    "CallbackSink",
    "ConversationSession",
    "ContinuationQueue",
    "DisplayedEntry",
    "EngineState",
    "NotificationSink",
    "RecordingSink",
    "TraversalEngine",
    "VariableStore",
    "VisibleHistory",
    # Frontends
    "FlowGraphBuilder",
    # Backends
    "MermaidExporter",
    "GraphvizExporter",
    "SvgExporter",
]
