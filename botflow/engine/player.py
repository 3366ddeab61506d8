"""Headless driver that plays a conversation without a presentation layer."""

import logging
from typing import Iterable, List, Optional

from botflow.core.ir import Step
from botflow.engine.history import DisplayedEntry, VisibleHistory
from botflow.engine.session import ConversationSession

logger = logging.getLogger(__name__)


class AutoPlayer:
    """
    Executes the steps of each displayed block and advances the session.

    Step types understood:
        set_variable  bind content["variable"] to content["value"]
        input         bind the next scripted answer to content["variable"]
        condition     follow content["edge_id"] when content["variable"]
                      equals content["equals"] (or is bound, if no "equals")
        link          enter the linked graph content["graph_id"]
    Any other type is display-only. A step with an outgoing edge ends the
    block; a block that runs out of steps advances with no edge, which ends
    the current graph.
    """

    def __init__(self, session: ConversationSession, answers: Iterable[str] = (), max_blocks: int = 1000):
        self.session = session
        self.answers: List[str] = list(answers)
        self.max_blocks = max_blocks
        self.transcript: List[str] = []

    def run(self) -> VisibleHistory:
        entry = self.session.start()
        played = 0
        while not self.session.is_completed:
            if entry is None:
                logger.warning("Nothing displayed and conversation not completed, stopping")
                break
            if played >= self.max_blocks:
                logger.warning("Stopped after %d blocks, flow may contain a cycle", played)
                break
            played += 1
            entry = self._play(entry)
        return self.session.history

    def _play(self, entry: DisplayedEntry) -> Optional[DisplayedEntry]:
        block = entry.block
        logger.debug("Playing block %s from step %d", block.id, entry.start_step_index)
        for step in block.steps[entry.start_step_index:]:
            self.transcript.append(self._describe(step))
            if step.type == "set_variable":
                self.session.bind_variable(step.content["variable"], step.content.get("value"))
            elif step.type == "input":
                answer = self.answers.pop(0) if self.answers else None
                if step.content.get("variable") and answer is not None:
                    self.session.bind_variable(step.content["variable"], answer)
            elif step.type == "condition":
                if self._condition_holds(step):
                    return self.session.advance(edge_id=step.content.get("edge_id"))
            elif step.type == "link":
                return self.session.enter_linked_graph(
                    step.content["graph_id"],
                    block_id=step.content.get("block_id"),
                    return_edge_id=step.outgoing_edge_id,
                )
            if step.outgoing_edge_id:
                return self.session.advance(edge_id=step.outgoing_edge_id)
        return self.session.advance(edge_id=None)

    def _condition_holds(self, step: Step) -> bool:
        value = self.session.variables.get(step.content["variable"])
        if "equals" in step.content:
            return value is not None and value.lower() == str(step.content["equals"]).lower()
        return value is not None

    @staticmethod
    def _describe(step: Step) -> str:
        text = step.content.get("text") or step.content.get("label") or ""
        return f"[{step.type}] {text}".rstrip()
