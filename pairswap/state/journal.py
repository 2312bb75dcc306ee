"""
Undo journal for pair operations.

Every ledger in this package (asset tokens, share ledgers, pairs, factories)
writes an undo entry to a journal *before* it mutates, but only while a frame
is open. Pair operations open a frame, and on failure roll it back, which
replays the entries newest first.

Frames nest. A nested operation that succeeds (e.g. a `sync` on another pair
from inside a flash callback) leaves its entries in place, so the enclosing
frame can still undo them. Entries are dropped only when the outermost frame
commits.

One journal must be shared by everything a single operation can touch. The
module-level default journal is that shared instance unless a caller injects
its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

UndoFn = Callable[[], None]


@dataclass(frozen=True)
class JournalMark:
    """Handle for one open frame: its nesting depth and where its entries start."""

    depth: int
    position: int


class Journal:
    def __init__(self) -> None:
        self._entries: List[UndoFn] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def __len__(self) -> int:
        return len(self._entries)

    def begin(self) -> JournalMark:
        self._depth += 1
        return JournalMark(depth=self._depth, position=len(self._entries))

    def record(self, undo: UndoFn) -> None:
        """Remember how to reverse a mutation about to happen. No-op outside a frame."""
        if self._depth > 0:
            self._entries.append(undo)

    def commit(self, mark: JournalMark) -> None:
        self._close(mark)
        if self._depth == 0:
            self._entries.clear()

    def rollback(self, mark: JournalMark) -> None:
        """Undo everything recorded since `mark`, newest first, and close the frame."""
        self._close(mark)
        while len(self._entries) > mark.position:
            undo = self._entries.pop()
            undo()

    def _close(self, mark: JournalMark) -> None:
        if mark.depth != self._depth:
            raise RuntimeError(f"journal frame {mark.depth} closed while frame {self._depth} is open")
        self._depth -= 1


_DEFAULT_JOURNAL = Journal()


def default_journal() -> Journal:
    return _DEFAULT_JOURNAL
