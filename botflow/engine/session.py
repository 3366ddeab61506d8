"""A single conversation over one or more linked flow graphs."""

import logging
from typing import Iterable, List, Mapping, Optional

from botflow.core.errors import FlowGraphError
from botflow.core.ir import FlowGraph, Variable
from botflow.engine.history import DisplayedEntry, VisibleHistory
from botflow.engine.notifications import NotificationSink
from botflow.engine.queue import ContinuationQueue
from botflow.engine.runner import EngineState, TraversalEngine
from botflow.engine.variables import VariableStore

logger = logging.getLogger(__name__)


class ConversationSession:
    """
    Owns the variable store, continuation queue and visible history of one
    conversation, and drives the traversal engine over them.

    Example:
        session = ConversationSession(graph, sink=RecordingSink(),
                                      predefined_variables={"Name": "Ada"})
        session.start()
        session.advance("e1")
        [entry.block.title for entry in session.history]
    """

    def __init__(
        self,
        graph: FlowGraph,
        sink: Optional[NotificationSink] = None,
        predefined_variables: Optional[Mapping[str, Optional[str]]] = None,
        start_block_id: Optional[str] = None,
        linked_graphs: Optional[Iterable[FlowGraph]] = None,
        strict_variables: bool = False,
    ):
        self.graph = graph
        self.sink = sink or NotificationSink()
        self.predefined_variables = dict(predefined_variables or {})
        self.start_block_id = start_block_id
        self.strict_variables = strict_variables

        linked = {g.id: g for g in linked_graphs or ()}
        self.variables = VariableStore(graph.variables)
        for linked_graph in linked.values():
            self.variables.register(linked_graph.variables)

        self.history = VisibleHistory()
        self.queue = ContinuationQueue()
        self.engine = TraversalEngine(graph, self.history, self.queue, self.sink, graphs=linked)
        self.prefilled_variables: List[Variable] = []
        self._started = False

    @property
    def state(self) -> EngineState:
        return self.engine.state

    @property
    def is_completed(self) -> bool:
        return self.engine.is_completed

    @property
    def active_graph(self) -> FlowGraph:
        return self.engine.active_graph

    def start(self) -> Optional[DisplayedEntry]:
        """Inject predefined variables, then display the first block."""
        if self._started:
            raise RuntimeError("Session already started.")
        self._started = True

        self.prefilled_variables = self.variables.inject_predefined(
            self.predefined_variables, strict=self.strict_variables
        )
        if self.prefilled_variables:
            logger.info("Prefilled %d variables", len(self.prefilled_variables))

        if self.start_block_id:
            return self.engine.advance(block_id=self.start_block_id)
        if not self.graph.blocks:
            raise FlowGraphError(f"Flow graph {self.graph.id} has no blocks to start from.")
        return self.engine.advance(edge_id=self.graph.start_edge_id)

    def advance(self, edge_id: Optional[str] = None, block_id: Optional[str] = None) -> Optional[DisplayedEntry]:
        if not self._started:
            raise RuntimeError("Session not started.")
        return self.engine.advance(edge_id=edge_id, block_id=block_id)

    def enter_linked_graph(
        self,
        graph_id: str,
        block_id: Optional[str] = None,
        return_edge_id: Optional[str] = None,
    ) -> Optional[DisplayedEntry]:
        """
        Hand control to a linked graph.

        return_edge_id is queued as a continuation in the currently active
        graph, so the conversation resumes there once the linked graph runs
        out of edges.
        """
        if not self._started:
            raise RuntimeError("Session not started.")
        if self.is_completed:
            logger.warning("Link into graph %s requested after completion, ignored", graph_id)
            return None
        if graph_id not in self.engine.graphs:
            raise FlowGraphError(f"Linked flow graph {graph_id} is not registered.")
        target = self.engine.graphs[graph_id]
        if block_id is None:
            if not target.blocks:
                raise FlowGraphError(f"Linked flow graph {graph_id} has no blocks.")
            block_id = target.blocks[0].id
        if target.get_block(block_id) is None:
            logger.warning("Block %s not found in linked graph %s, nothing displayed", block_id, graph_id)
            return None

        self.queue.enqueue(return_edge_id, graph_id=self.engine.active_graph.id)
        self.engine.switch_graph(graph_id)
        return self.engine.advance(block_id=block_id)

    def bind_variable(self, name_or_id: str, value: Optional[str]) -> Variable:
        return self.variables.bind(name_or_id, value)
