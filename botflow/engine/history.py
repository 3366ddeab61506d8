"""Append-only record of the blocks shown in a session."""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from botflow.core.ir import Block


@dataclass(frozen=True)
class DisplayedEntry:
    block: Block
    start_step_index: int = 0
    graph_id: Optional[str] = None


class VisibleHistory:
    """Ordered by traversal time. Entries are never reordered, removed or replaced."""

    def __init__(self):
        self._entries: List[DisplayedEntry] = []

    def append(self, block: Block, start_step_index: int = 0, graph_id: Optional[str] = None) -> DisplayedEntry:
        entry = DisplayedEntry(block=block, start_step_index=start_step_index, graph_id=graph_id)
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[DisplayedEntry, ...]:
        return tuple(self._entries)

    @property
    def last(self) -> Optional[DisplayedEntry]:
        return self._entries[-1] if self._entries else None

    def block_ids(self) -> List[str]:
        return [entry.block.id for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DisplayedEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> DisplayedEntry:
        return self._entries[index]
