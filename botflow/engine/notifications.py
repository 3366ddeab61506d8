"""Observers notified as the conversation advances."""

from typing import Callable, List, Optional, Tuple

from botflow.core.ir import Edge


class NotificationSink:
    """
    Receives traversal events.

    on_edge_visible is called once per block transition with the edge that
    was followed (synthetic for direct block entry). on_completed is called
    once when the conversation ends; nothing is emitted after it.
    """

    def on_edge_visible(self, edge: Edge) -> None:
        pass

    def on_completed(self) -> None:
        pass


class CallbackSink(NotificationSink):
    """Adapts plain callables to the sink interface."""

    def __init__(
        self,
        on_edge_visible: Optional[Callable[[Edge], None]] = None,
        on_completed: Optional[Callable[[], None]] = None,
    ):
        self._on_edge_visible = on_edge_visible
        self._on_completed = on_completed

    def on_edge_visible(self, edge: Edge) -> None:
        if self._on_edge_visible:
            self._on_edge_visible(edge)

    def on_completed(self) -> None:
        if self._on_completed:
            self._on_completed()


class RecordingSink(NotificationSink):
    """Keeps every event in emission order."""

    def __init__(self):
        self.events: List[Tuple[str, Optional[Edge]]] = []

    def on_edge_visible(self, edge: Edge) -> None:
        self.events.append(("edge_visible", edge))

    def on_completed(self) -> None:
        self.events.append(("completed", None))

    @property
    def edges(self) -> List[Edge]:
        return [edge for kind, edge in self.events if kind == "edge_visible"]

    @property
    def completed(self) -> bool:
        return any(kind == "completed" for kind, _ in self.events)
