"""FIFO queue of cross-graph continuations."""

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Optional


@dataclass(frozen=True)
class ContinuationEntry:
    """
    An edge of an embedding flow graph, resumed once the embedded graph ends.

    graph_id None means the edge is looked up in whichever graph is active
    when the entry is consumed.
    """
    edge_id: Optional[str]
    graph_id: Optional[str] = None


class ContinuationQueue:
    """Pending continuations, consumed oldest first."""

    def __init__(self):
        self._entries: Deque[ContinuationEntry] = deque()

    def enqueue(self, edge_id: Optional[str], graph_id: Optional[str] = None) -> ContinuationEntry:
        entry = ContinuationEntry(edge_id=edge_id, graph_id=graph_id)
        self._entries.append(entry)
        return entry

    def dequeue_next(self) -> Optional[ContinuationEntry]:
        """Remove and return the oldest entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries.popleft()

    def peek(self) -> Optional[ContinuationEntry]:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[ContinuationEntry]:
        return iter(tuple(self._entries))
