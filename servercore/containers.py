"""Thread-safe queue and stack."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, List, TypeVar

T = TypeVar("T")


class EventLockQueue(Generic[T]):
    """FIFO queue whose ``pop`` blocks until an item is available."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition()

    def push(self, item: T) -> None:
        with self._cond:
            self._items.append(item)
            self._cond.notify()

    def pop(self) -> T:
        with self._cond:
            self._cond.wait_for(lambda: len(self._items) > 0)
            return self._items.popleft()

    def empty(self) -> bool:
        with self._cond:
            return not self._items


class LockStack(Generic[T]):
    """LIFO stack guarded by a mutex."""

    def __init__(self) -> None:
        self._items: List[T] = []
        self._lock = threading.Lock()

    def push(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def pop(self) -> T:
        """Remove and return the top item; IndexError when empty."""
        with self._lock:
            if not self._items:
                raise IndexError("pop from empty stack")
            return self._items.pop()

    def top(self) -> T:
        """Return the top item without removing it; IndexError when empty."""
        with self._lock:
            if not self._items:
                raise IndexError("top of empty stack")
            return self._items[-1]

    def empty(self) -> bool:
        with self._lock:
            return not self._items