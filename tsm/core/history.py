# tsm/core/history.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, List, TypeVar

S = TypeVar("S")


class StateHistory(Generic[S]):
    """
    Bounded, insertion-ordered record of visited states. Once `capacity`
    entries are held, appending evicts the oldest entry first.
    """

    def __init__(self, capacity: int, initial: S) -> None:
        """
        :param capacity: Maximum number of states retained. Must be positive.
        :param initial: The first state recorded.
        """
        if capacity <= 0:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._entries: Deque[S] = deque([initial], maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def append(self, state: S) -> None:
        self._entries.append(state)

    def to_list(self) -> List[S]:
        """Return a copy of the history, oldest first."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[S]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"StateHistory(capacity={self.capacity}, size={len(self)})"
