import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sheet_preview import __name__ as sheet_preview_name
from sheet_preview.constants import HISTORY_CAPACITY

logger = logging.getLogger(sheet_preview_name)
debug = logger.debug

__all__ = ["EditHistory"]


class EditHistory:
    """
    A bounded, linear undo/redo log of document snapshots.

    Recording a snapshot after an undo discards every snapshot that could
    have been redone. Once more than ``capacity`` snapshots are held the
    oldest is dropped.

    Parameters
    ----------
    capacity: int, optional, default: 50
        The maximum number of snapshots kept.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._snapshots: List[str] = []
        self._index = -1
        self._restoring = False

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def position(self) -> int:
        """int: Index of the snapshot matching the live document, or -1 if empty."""
        return self._index

    @property
    def current(self) -> Optional[str]:
        return self._snapshots[self._index] if self._index >= 0 else None

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    @property
    def is_restoring(self) -> bool:
        return self._restoring

    def reset(self) -> None:
        """Forget every snapshot."""
        self._snapshots.clear()
        self._index = -1

    def record(self, snapshot: str) -> None:
        """
        Record the state of the document after an edit.

        Does nothing while a snapshot is being restored.
        """
        if self._restoring:
            return
        del self._snapshots[self._index + 1 :]
        self._snapshots.append(snapshot)
        self._index += 1
        if len(self._snapshots) > self.capacity:
            del self._snapshots[0]
            self._index -= 1
        debug("record: position=%d, size=%d", self._index, len(self._snapshots))

    def undo(self) -> Optional[str]:
        """Step back one snapshot and return it, or ``None`` at the oldest snapshot."""
        if not self.can_undo:
            return None
        self._index -= 1
        debug("undo: position=%d", self._index)
        return self._snapshots[self._index]

    def redo(self) -> Optional[str]:
        """Step forward one snapshot and return it, or ``None`` at the newest snapshot."""
        if not self.can_redo:
            return None
        self._index += 1
        debug("redo: position=%d", self._index)
        return self._snapshots[self._index]

    @contextmanager
    def restoring(self) -> Iterator[None]:
        """Suppress :py:meth:`record` while a snapshot is put back into the document."""
        self._restoring = True
        try:
            yield
        finally:
            self._restoring = False
