"""Bounded undo history."""

from collections import deque
from typing import Optional

from merge2048.addons.types import HistorySnapshot


class History:
    """
    Snapshots preceding effective moves, oldest first.

    Pushing beyond the capacity evicts the oldest snapshot. A push can be rolled back with
    `discard_last`, which also puts back the snapshot it evicted.
    """

    def __init__(self, capacity: int = 10):
        self.capacity = capacity
        self._snapshots: deque[HistorySnapshot] = deque(maxlen=capacity)
        self._evicted: Optional[HistorySnapshot] = None

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return bool(self._snapshots)

    def push(self, snapshot: HistorySnapshot) -> None:
        self._evicted = self._snapshots[0] if len(self._snapshots) == self.capacity else None
        self._snapshots.append(snapshot)

    def pop(self) -> Optional[HistorySnapshot]:
        """Remove and return the most recent snapshot, or None when the history is empty."""
        self._evicted = None
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def discard_last(self) -> None:
        """Roll back the last push."""
        if self._snapshots:
            self._snapshots.pop()
        if self._evicted is not None:
            self._snapshots.appendleft(self._evicted)
            self._evicted = None

    def clear(self) -> None:
        self._snapshots.clear()
        self._evicted = None
