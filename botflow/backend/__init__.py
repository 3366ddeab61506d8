"""Backend exporters for flow graphs."""

from botflow.backend.graphviz import GraphvizExporter
from botflow.backend.mermaid import MermaidExporter
from botflow.backend.svg import SvgExporter

__all__ = [
    "GraphvizExporter",
    "MermaidExporter",
    "SvgExporter",
]
