"""Tests for ConversationSession: start-up, injection and linked graphs."""

import pytest
from botflow.core.errors import FlowGraphError, UnknownVariableError
from botflow.core.ir import FlowGraph, Block, Variable
from botflow.engine import (
    CallbackSink,
    ConversationSession,
    EngineState,
    RecordingSink,
    SYNTHETIC_EDGE_ID,
)


class TestStart:

    def test_start_follows_start_edge(self, two_block_graph):
        sink = RecordingSink()
        session = ConversationSession(two_block_graph, sink=sink)

        entry = session.start()

        assert entry.block.id == "B"
        assert [e.id for e in sink.edges] == ["e1"]
        assert session.state is EngineState.ADVANCING

    def test_start_block_uses_direct_entry(self, two_block_graph):
        sink = RecordingSink()
        session = ConversationSession(two_block_graph, sink=sink, start_block_id="A")

        session.start()
        session.advance("e1")

        assert [(e.block.id, e.start_step_index) for e in session.history] == [("A", 0), ("B", 0)]
        assert [e.id for e in sink.edges] == [SYNTHETIC_EDGE_ID, "e1"]

    def test_unknown_start_block_displays_nothing(self, two_block_graph):
        sink = RecordingSink()
        session = ConversationSession(two_block_graph, sink=sink, start_block_id="nope")

        assert session.start() is None
        assert sink.events == []
        assert session.state is EngineState.AWAITING_START

    def test_start_twice_raises(self, two_block_graph):
        session = ConversationSession(two_block_graph)
        session.start()

        with pytest.raises(RuntimeError, match="already started"):
            session.start()

    def test_advance_before_start_raises(self, two_block_graph):
        session = ConversationSession(two_block_graph)

        with pytest.raises(RuntimeError, match="not started"):
            session.advance("e1")

    def test_graph_without_blocks_raises(self):
        session = ConversationSession(FlowGraph(graph_id="empty"))

        with pytest.raises(FlowGraphError):
            session.start()

    def test_start_block_without_steps_completes(self):
        graph = FlowGraph(graph_id="g")
        graph.add_block(Block(block_id="start"))
        sink = RecordingSink()
        session = ConversationSession(graph, sink=sink)

        assert session.start() is None
        assert session.is_completed
        assert sink.events == [("completed", None)]

    def test_default_sink_is_silent(self, two_block_graph):
        session = ConversationSession(two_block_graph)
        session.start()
        session.advance("missing")
        assert session.is_completed


class TestPredefinedVariables:

    def test_injected_before_first_block(self, two_block_graph):
        seen = []
        session = None

        def on_visible(edge):
            seen.append(session.variables.get("name"))

        session = ConversationSession(
            two_block_graph,
            sink=CallbackSink(on_edge_visible=on_visible),
            predefined_variables={"Name": "x"},
        )
        session.start()

        assert seen == ["x"]

    def test_prefilled_variables_recorded(self, two_block_graph):
        session = ConversationSession(two_block_graph, predefined_variables={"Name": "x", "other": "y"})
        session.start()

        assert session.prefilled_variables == [Variable("name", variable_id="v-name", value="x")]
        assert session.variables.get("full_name") is None

    def test_authored_value_is_kept(self):
        graph = FlowGraph(graph_id="g")
        block = graph.add_block(Block(block_id="a"))
        graph.add_variable(Variable("lang", variable_id="v", value="fr"))
        session = ConversationSession(graph, predefined_variables={"LANG": "en"}, start_block_id=block.id)

        session.start()

        assert session.prefilled_variables == []
        assert session.variables.get("lang") == "fr"

    def test_strict_variables_raise_on_unknown_key(self, two_block_graph):
        session = ConversationSession(two_block_graph, predefined_variables={"nmae": "x"}, strict_variables=True)

        with pytest.raises(UnknownVariableError):
            session.start()

    def test_bind_variable(self, two_block_graph):
        session = ConversationSession(two_block_graph)
        session.bind_variable("Full_Name", "Ada Lovelace")
        assert session.variables.values()["full_name"] == "Ada Lovelace"


class TestLinkedGraphs:

    def test_linked_graph_returns_to_caller(self, two_block_graph, outer_graph):
        sink = RecordingSink()
        session = ConversationSession(two_block_graph, sink=sink, start_block_id="A", linked_graphs=[outer_graph])
        session.start()

        entry = session.enter_linked_graph("H", return_edge_id="e1")
        assert entry.block.id == "H1"
        assert session.active_graph is outer_graph
        assert len(session.queue) == 1

        session.advance("e2")
        returned = session.advance(None)

        assert returned.block.id == "B"
        assert returned.graph_id == "G"
        assert session.active_graph is two_block_graph
        assert not sink.completed

        session.advance(None)
        assert sink.events[-1] == ("completed", None)
        assert session.history.block_ids() == ["A", "H1", "H2", "B"]
        assert [e.id for e in sink.edges] == [SYNTHETIC_EDGE_ID, SYNTHETIC_EDGE_ID, "e2", "e1"]

    def test_enter_linked_graph_at_block(self, two_block_graph, outer_graph):
        session = ConversationSession(two_block_graph, start_block_id="A", linked_graphs=[outer_graph])
        session.start()

        entry = session.enter_linked_graph("H", block_id="H2")

        assert entry.block.id == "H2"

    def test_unknown_block_in_linked_graph_changes_nothing(self, two_block_graph, outer_graph):
        sink = RecordingSink()
        session = ConversationSession(two_block_graph, sink=sink, start_block_id="A", linked_graphs=[outer_graph])
        session.start()

        entry = session.enter_linked_graph("H", block_id="ghost", return_edge_id="e1")

        assert entry is None
        assert session.active_graph is two_block_graph
        assert len(session.queue) == 0
        assert session.history.block_ids() == ["A"]
        assert len(sink.events) == 1

    def test_unknown_linked_graph_raises(self, two_block_graph):
        session = ConversationSession(two_block_graph)
        session.start()

        with pytest.raises(FlowGraphError):
            session.enter_linked_graph("nowhere")

    def test_linked_graph_variables_are_bindable(self, two_block_graph, outer_graph):
        session = ConversationSession(two_block_graph, linked_graphs=[outer_graph], predefined_variables={"OUTER": "1"})
        session.start()

        assert session.variables.get("v-outer") == "1"

    def test_link_after_completion_is_ignored(self, two_block_graph, outer_graph):
        session = ConversationSession(two_block_graph, linked_graphs=[outer_graph])
        session.start()
        session.advance("missing")

        assert session.enter_linked_graph("H") is None
        assert len(session.queue) == 0
        assert session.active_graph is two_block_graph


def test_history_bounded_by_advances(two_block_graph):
    session = ConversationSession(two_block_graph, start_block_id="A")
    session.start()
    advances = ["e1", "e1", "missing", "e1"]
    for edge_id in advances:
        session.advance(edge_id)

    assert len(session.history) <= len(advances) + 1
    assert session.history.block_ids() == ["A", "B", "B"]
