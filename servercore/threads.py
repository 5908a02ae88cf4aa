"""Starts worker threads and waits for them."""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

from servercore.deadlock import DeadlockDetector, default_detector


class ThreadManager:
    """Runs each pushed callback on its own thread."""

    def __init__(self, detector: Optional[DeadlockDetector] = None) -> None:
        self._detector = detector if detector is not None else default_detector()
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []

    def push(self, callback: Callable[[], None]) -> None:
        """Start a thread running ``callback``; its lock records are cleared after."""

        def run() -> None:
            try:
                callback()
            finally:
                self._detector.clear_thread_state()

        thread = threading.Thread(target=run)
        with self._lock:
            self._threads.append(thread)
            thread.start()

    def join(self) -> None:
        """Wait for every started thread, including ones started meanwhile."""
        while True:
            with self._lock:
                pending = list(self._threads)
                self._threads.clear()
            if not pending:
                return
            for thread in pending:
                if thread is not threading.current_thread():
                    thread.join()