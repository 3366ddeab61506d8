"""Traversal engine that resolves the next block of a conversation."""

import enum
import logging
from typing import Dict, Mapping, Optional

from botflow.core.ir import FlowGraph, Edge, Locator
from botflow.engine.history import DisplayedEntry, VisibleHistory
from botflow.engine.notifications import NotificationSink
from botflow.engine.queue import ContinuationQueue

logger = logging.getLogger(__name__)

# Direct block entry has no real preceding edge; these placeholders stand in.
SYNTHETIC_EDGE_ID = "edgeId"
SYNTHETIC_SOURCE = Locator(block_id="block", step_id="step")


class EngineState(enum.Enum):
    AWAITING_START = "awaiting_start"
    ADVANCING = "advancing"
    COMPLETED = "completed"


class TraversalEngine:
    """
    Resolves which block becomes visible next.

    Each advance either appends one entry to the history and emits one
    on_edge_visible, or ends the conversation with a single on_completed.
    When an edge is missing from the active graph, pending continuations
    are consumed oldest first, switching the active graph to the one that
    owns each continuation edge.

    The history, continuation queue and sink belong to the session; the
    engine only keeps the active graph and its state.
    """

    def __init__(
        self,
        graph: FlowGraph,
        history: VisibleHistory,
        queue: ContinuationQueue,
        sink: NotificationSink,
        graphs: Optional[Mapping[str, FlowGraph]] = None,
    ):
        self.active_graph = graph
        self.history = history
        self.queue = queue
        self.sink = sink
        self.graphs: Dict[str, FlowGraph] = {graph.id: graph}
        self.graphs.update(graphs or {})
        self.state = EngineState.AWAITING_START

    @property
    def is_completed(self) -> bool:
        return self.state is EngineState.COMPLETED

    def switch_graph(self, graph_id: str) -> Optional[FlowGraph]:
        """Make another registered graph active. Returns None if it is unknown."""
        graph = self.graphs.get(graph_id)
        if graph is None:
            return None
        if graph is not self.active_graph:
            logger.info("Switching active graph %s -> %s", self.active_graph.id, graph.id)
            self.active_graph = graph
        return graph

    def advance(self, edge_id: Optional[str] = None, block_id: Optional[str] = None) -> Optional[DisplayedEntry]:
        """
        Display the next block, entered directly by id or by following an edge.

        A block id takes precedence over an edge id. Returns the appended
        history entry, or None when nothing was displayed.
        """
        if self.is_completed:
            logger.warning("Advance requested after completion (edge=%s, block=%s), ignored", edge_id, block_id)
            return None
        if block_id:
            return self.advance_to_block(block_id)
        return self.advance_edge(edge_id)

    def advance_to_block(self, block_id: str) -> Optional[DisplayedEntry]:
        if self.is_completed:
            logger.warning("Block entry %s requested after completion, ignored", block_id)
            return None

        block = self.active_graph.get_block(block_id)
        if block is None:
            logger.warning("Block %s not found in graph %s, nothing displayed", block_id, self.active_graph.id)
            return None

        edge = Edge(
            source=SYNTHETIC_SOURCE,
            target=Locator(block_id=block.id),
            edge_id=SYNTHETIC_EDGE_ID,
            metadata={"synthetic": True},
        )
        logger.debug("Direct entry into block %s", block.id)
        entry = self.history.append(block, 0, graph_id=self.active_graph.id)
        self.state = EngineState.ADVANCING
        self.sink.on_edge_visible(edge)
        return entry

    def advance_edge(self, edge_id: Optional[str]) -> Optional[DisplayedEntry]:
        if self.is_completed:
            logger.warning("Edge %s requested after completion, ignored", edge_id)
            return None

        edge = self.active_graph.get_edge(edge_id)
        while edge is None:
            entry = self.queue.dequeue_next()
            if entry is None:
                logger.debug("Edge %s not found and no continuation pending", edge_id)
                return self._complete()
            edge_id = entry.edge_id
            if entry.graph_id is not None and self.switch_graph(entry.graph_id) is None:
                logger.warning("Continuation into unknown graph %s skipped", entry.graph_id)
                continue
            logger.debug("Resuming continuation edge %s in graph %s", edge_id, self.active_graph.id)
            edge = self.active_graph.get_edge(edge_id)

        block = self.active_graph.get_block(edge.target.block_id)
        if block is None:
            logger.debug("Edge %s targets missing block %s", edge.id, edge.target.block_id)
            return self._complete()

        start_step_index = 0
        if edge.target.step_id:
            index = block.step_index(edge.target.step_id)
            if index is None:
                logger.debug("Step %s not in block %s, starting at first step", edge.target.step_id, block.id)
            else:
                start_step_index = index

        # Appended before notifying so a sink that advances from its callback sees ordered history.
        entry = self.history.append(block, start_step_index, graph_id=self.active_graph.id)
        self.state = EngineState.ADVANCING
        self.sink.on_edge_visible(edge)
        return entry

    def _complete(self) -> None:
        self.state = EngineState.COMPLETED
        logger.info("Conversation completed after %d blocks", len(self.history))
        self.sink.on_completed()
        return None
