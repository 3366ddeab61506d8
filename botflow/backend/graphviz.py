import graphviz
from typing import Optional
from botflow.core.ir import FlowGraph, Block


class GraphvizExporter:
    """Exports a FlowGraph to Graphviz/Dot format or renders it."""

    MISSING_NODE = "__missing__"

    @staticmethod
    def _escape_html(text: str) -> str:
        """Escape HTML special characters for Graphviz."""
        return (
            text.replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
        )

    @staticmethod
    def _html_label(block: Block) -> str:
        """HTML-like table label: block title followed by one row per step."""
        title = GraphvizExporter._escape_html(block.title or block.id)
        rows = [f'<TR><TD BGCOLOR="lightgrey"><B>{title}</B></TD></TR>']
        for idx, step in enumerate(block.steps):
            text = GraphvizExporter._escape_html(f"{idx}. {step.type}")
            rows.append(f'<TR><TD ALIGN="LEFT" PORT="{idx}"><FONT POINT-SIZE="10">{text}</FONT></TD></TR>')
        return '<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0" CELLPADDING="4">' + "".join(rows) + '</TABLE>>'

    @staticmethod
    def to_digraph(graph: FlowGraph, include_steps: bool = True) -> graphviz.Digraph:
        """
        Converts a FlowGraph to a graphviz.Digraph object.

        Args:
            graph: The flow graph to convert
            include_steps: If True, render each block as a table of its steps
        """
        dot = graphviz.Digraph(name=graph.name, comment=graph.name)
        dot.attr(rankdir='TB')

        for block in graph.blocks:
            if include_steps and block.steps:
                dot.node(block.id, label=GraphvizExporter._html_label(block), shape="plaintext")
            else:
                dot.node(block.id, label=block.title or block.id, shape="box")

        has_dangling = False
        for edge in graph.edges.values():
            target = edge.target.block_id
            if graph.get_block(target) is None:
                target = GraphvizExporter.MISSING_NODE
                has_dangling = True
            dot.edge(edge.source.block_id, target, label=edge.id)

        if has_dangling:
            dot.node(GraphvizExporter.MISSING_NODE, label="missing block", shape="ellipse", style="dashed")

        return dot

    @staticmethod
    def to_dot(graph: FlowGraph) -> str:
        """Returns the DOT source string for the flow graph."""
        return GraphvizExporter.to_digraph(graph).source

    @staticmethod
    def render(graph: FlowGraph, filename: str, format: str = 'png', view: bool = False) -> Optional[str]:
        """Renders the flow graph to a file."""
        dot = GraphvizExporter.to_digraph(graph)
        return dot.render(filename, format=format, view=view)
