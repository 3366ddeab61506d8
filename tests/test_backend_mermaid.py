"""Tests for the Mermaid backend exporter."""

from botflow.core.ir import FlowGraph, Block, Edge, Locator
from botflow.backend.mermaid import MermaidExporter


class TestMermaidExporter:
    """Tests for MermaidExporter functionality."""

    def test_output_starts_with_graph(self, two_block_graph):
        output = MermaidExporter.to_mermaid(two_block_graph)

        assert output.startswith("graph TD")

    def test_custom_direction(self, two_block_graph):
        assert MermaidExporter.to_mermaid(two_block_graph, direction="LR").startswith("graph LR")

    def test_block_nodes_list_steps(self, two_block_graph):
        output = MermaidExporter.to_mermaid(two_block_graph)

        assert 'b_A["<b>A</b><br/>0. text"]' in output
        assert 'b_B["<b>B</b><br/>0. text"]' in output

    def test_block_nodes_without_steps(self, two_block_graph):
        output = MermaidExporter.to_mermaid(two_block_graph, include_steps=False)

        assert 'b_A["A"]' in output

    def test_edge_is_labelled_with_id(self, two_block_graph):
        output = MermaidExporter.to_mermaid(two_block_graph)

        assert "b_A -- e1 --> b_B" in output

    def test_edge_to_target_step(self, survey_graph):
        output = MermaidExporter.to_mermaid(survey_graph)

        assert "b_ask -- e-pro @pro-body --> b_pro" in output

    def test_ids_are_sanitized(self):
        graph = FlowGraph(graph_id="g")
        graph.add_block(Block(title="Ask email", block_id="ask-email"))

        output = MermaidExporter.to_mermaid(graph)

        assert 'b_ask_email["Ask email"]' in output


def test_dangling_edge_points_to_missing_node():
    graph = FlowGraph(graph_id="g")
    graph.add_block(Block(title="A", block_id="a"))
    graph.add_edge(Edge(Locator("a", "s"), Locator("ghost"), edge_id="d"))

    output = MermaidExporter.to_mermaid(graph)

    assert "b_a -- d --> missing_block" in output
    assert 'missing_block(["missing block"])' in output


def test_title_is_escaped():
    graph = FlowGraph(graph_id="g")
    graph.add_block(Block(title='Say "hi" (now)', block_id="a"))

    output = MermaidExporter.to_mermaid(graph)

    assert "Say #quot;hi#quot; #40;now#41;" in output
