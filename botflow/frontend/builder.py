"""Imperative FlowGraphBuilder for manual flow graph construction."""

from typing import Any, Dict, Optional

from botflow.core.ir import FlowGraph, Block, Step, Edge, Locator, Variable


class FlowGraphBuilder:
    """
    Imperative API for building flow graphs by adding blocks, steps and edges.

    Example:
        b = FlowGraphBuilder("Lead form")
        email = b.variable("Email")
        start = b.block("Start")
        hello = b.step(start, "text", text="Hi there!")
        ask = b.block("Ask email")
        b.step(ask, "input", variable="Email")
        b.connect(hello, ask)
        graph = b.build()
    """

    def __init__(self, name: str = "FlowGraph", graph_id: Optional[str] = None):
        self.graph = FlowGraph(name, graph_id=graph_id)

    def block(self, title: str, block_id: Optional[str] = None) -> Block:
        return self.graph.add_block(Block(title=title, block_id=block_id))

    def step(self, block: Block, step_type: str = "text", step_id: Optional[str] = None, **content: Any) -> Step:
        return block.add_step(Step(block.id, step_type=step_type, step_id=step_id, content=content))

    def variable(self, name: str, variable_id: Optional[str] = None, value: Optional[str] = None) -> Variable:
        return self.graph.add_variable(Variable(name, variable_id=variable_id, value=value))

    def connect(
        self,
        source: Step,
        target: Block,
        target_step: Optional[Step] = None,
        edge_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Edge:
        """Link a step to a block and make it the step's outgoing edge."""
        edge = Edge(
            Locator(source.block_id, source.id),
            Locator(target.id, target_step.id if target_step else None),
            edge_id=edge_id,
            metadata=metadata,
        )
        self.graph.add_edge(edge)
        source.outgoing_edge_id = edge.id
        return edge

    def build(self) -> FlowGraph:
        return self.graph
