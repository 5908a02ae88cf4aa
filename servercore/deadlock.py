"""Mutexes with lock-order tracking and cycle (deadlock) detection."""

from __future__ import annotations

import threading
from typing import Dict, List, Set, Tuple


class DeadlockError(RuntimeError):
    """Raised when acquiring a lock would close a cycle in the lock order."""

    def __init__(self, report: str, cycle: List[Tuple[object, str]]) -> None:
        super().__init__(report)
        self.report = report
        self.cycle = tuple(cycle)


class Lock:
    """A plain mutex; ordering checks are done by a DeadlockDetector."""

    def __init__(self) -> None:
        self._mutex = threading.Lock()

    def acquire(self) -> None:
        self._mutex.acquire()

    def release(self) -> None:
        self._mutex.release()


class DeadlockDetector:
    """Records which lock is requested while which is held and finds cycles.

    Held locks are tracked per thread; the lock-order graph is shared.
    """

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._graph: Dict[int, Set[int]] = {}
        self._log: Dict[int, Tuple[int, str]] = {}
        self._local = threading.local()

    def _held(self) -> List[int]:
        held = getattr(self._local, "held", None)
        if held is None:
            held = self._local.held = []
        return held

    def lock_request(self, lock: Lock, name: str) -> None:
        """Record the request and raise DeadlockError if it closes a cycle."""
        held = self._held()
        if not held:
            return
        requested = id(lock)
        with self._mutex:
            self._graph.setdefault(held[-1], set()).add(requested)
            self._log[requested] = (threading.get_ident(), name)
            visited: List[int] = []
            if self._cycle_check(requested, requested, visited):
                visited.append(requested)
                raise self._deadlock_error(visited)

    def lock_acquired(self, lock: Lock) -> None:
        self._held().append(id(lock))

    def lock_release(self) -> None:
        held = self._held()
        if held:
            held.pop()

    def held_locks(self) -> Tuple[int, ...]:
        """Identities of the locks this thread holds, oldest first."""
        return tuple(self._held())

    def clear_thread_state(self) -> None:
        """Forget every lock this thread is recorded as holding."""
        self._held().clear()

    def _cycle_check(self, current: int, node: int, visited: List[int]) -> bool:
        if node in visited:
            return False
        visited.append(node)
        for successor in self._graph.get(node, ()):
            if successor == current:
                return True
            if self._cycle_check(current, successor, visited):
                return True
        return False

    def _deadlock_error(self, visited: List[int]) -> DeadlockError:
        cycle = [self._log.get(addr, ("<unknown>", "<unknown>")) for addr in visited]
        lines = [
            "=" * 52,
            "[DEADLOCK_DETECTED]",
            "Cycle Path (Thread ID) : (Class Name)",
        ]
        lines.extend(f" → Thread {thread_id} : {name}" for thread_id, name in cycle)
        lines.append("=" * 52)
        return DeadlockError("\n".join(lines) + "\n", cycle)


_DEFAULT = DeadlockDetector()


def default_detector() -> DeadlockDetector:
    """The process-wide detector."""
    return _DEFAULT