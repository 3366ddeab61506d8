"""SVG backend for flow graphs using Graphviz.

Requirements:
    The Graphviz executables must be installed on your system:
    - macOS: brew install graphviz
    - Ubuntu/Debian: sudo apt-get install graphviz
    - Windows: Download from https://graphviz.org/download/

Example:
    >>> from botflow import SvgExporter
    >>> svg_string = SvgExporter.to_svg(graph)
"""

import graphviz

from botflow.backend.graphviz import GraphvizExporter
from botflow.core.ir import FlowGraph


__all__ = ["SvgExporter"]


class SvgExporter:
    """Exports a FlowGraph to SVG format using Graphviz."""

    @staticmethod
    def to_svg(graph: FlowGraph, include_steps: bool = True) -> str:
        """
        Convert a flow graph to an SVG string.

        Raises:
            RuntimeError: If the Graphviz executable is not available
        """
        digraph = GraphvizExporter.to_digraph(graph, include_steps=include_steps)
        try:
            svg_bytes = digraph.pipe(format='svg')
        except graphviz.ExecutableNotFound as e:
            raise RuntimeError(
                "Graphviz executable not found. "
                "Please install Graphviz: https://graphviz.org/download/"
            ) from e
        return svg_bytes.decode('utf-8')
