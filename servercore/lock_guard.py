"""Scoped guards that take a Lock with deadlock detection."""

from __future__ import annotations

from typing import Optional

from servercore.deadlock import DeadlockDetector, Lock, default_detector


class LockGuard:
    """Holds the lock for the duration of a ``with`` block."""

    def __init__(
        self, lock: Lock, name: str, detector: Optional[DeadlockDetector] = None
    ) -> None:
        self._lock = lock
        self._name = name
        self._detector = detector if detector is not None else default_detector()

    def __enter__(self) -> "LockGuard":
        self._detector.lock_request(self._lock, self._name)
        self._lock.acquire()
        self._detector.lock_acquired(self._lock)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._lock.release()
        self._detector.lock_release()


class UniqueLockGuard:
    """A guard that locks on creation and can be unlocked and relocked.

    Created with ``lock=None`` it holds nothing, and ``lock()``/``unlock()``
    raise RuntimeError.
    """

    def __init__(
        self,
        lock: Optional[Lock],
        name: Optional[str] = None,
        detector: Optional[DeadlockDetector] = None,
    ) -> None:
        self._lock = lock
        self._name = name
        self._detector = detector if detector is not None else default_detector()
        self._owns = False
        if lock is not None:
            self._call_lock()

    def lock(self) -> None:
        self._require_lock()
        if not self._owns:
            self._call_lock()

    def unlock(self) -> None:
        self._require_lock()
        if self._owns:
            self._lock.release()
            self._detector.lock_release()
            self._owns = False

    def owns(self) -> bool:
        return self._owns

    def __enter__(self) -> "UniqueLockGuard":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._owns:
            self.unlock()

    def _require_lock(self) -> None:
        if self._lock is None:
            raise RuntimeError("guard has no lock")

    def _call_lock(self) -> None:
        self._detector.lock_request(self._lock, self._name)
        self._lock.acquire()
        self._detector.lock_acquired(self._lock)
        self._owns = True