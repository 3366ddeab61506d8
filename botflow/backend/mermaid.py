import re

from botflow.core.ir import FlowGraph, Block


class MermaidExporter:
    """Exports a FlowGraph to Mermaid.js syntax."""

    # Dangling edges point at this node
    MISSING_NODE = "missing_block"

    @staticmethod
    def _sanitize(text: str) -> str:
        """Escape special characters for Mermaid syntax."""
        return text.replace('"', '#quot;').replace("(", "#40;").replace(")", "#41;")

    @staticmethod
    def _node_id(block_id: str) -> str:
        return "b_" + re.sub(r"[^A-Za-z0-9_]", "_", block_id)

    @staticmethod
    def _block_label(block: Block, include_steps: bool) -> str:
        label = MermaidExporter._sanitize(block.title or block.id)
        if include_steps and block.steps:
            lines = [MermaidExporter._sanitize(f"{i}. {step.type}") for i, step in enumerate(block.steps)]
            label = f"<b>{label}</b><br/>" + "<br/>".join(lines)
        return label

    @staticmethod
    def to_mermaid(graph: FlowGraph, direction: str = "TD", include_steps: bool = True) -> str:
        """
        Convert a flow graph to Mermaid diagram syntax.

        Args:
            graph: The flow graph to convert
            direction: Graph direction (TD, LR, etc.)
            include_steps: If True, list each block's steps in its label
        """
        lines = [f"graph {direction}"]

        for block in graph.blocks:
            label = MermaidExporter._block_label(block, include_steps)
            lines.append(f'    {MermaidExporter._node_id(block.id)}["{label}"]')

        has_dangling = False
        for edge in graph.edges.values():
            source = MermaidExporter._node_id(edge.source.block_id)
            if graph.get_block(edge.target.block_id) is None:
                target = MermaidExporter.MISSING_NODE
                has_dangling = True
            else:
                target = MermaidExporter._node_id(edge.target.block_id)
            label = MermaidExporter._sanitize(edge.id)
            if edge.target.step_id:
                label += MermaidExporter._sanitize(f" @{edge.target.step_id}")
            lines.append(f"    {source} -- {label} --> {target}")

        if has_dangling:
            lines.append(f'    {MermaidExporter.MISSING_NODE}(["missing block"])')

        return "\n".join(lines)
