"""Stress run: worker threads that take their lock and log in a loop."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from typing import List, Optional, TextIO

from servercore.deadlock import Lock
from servercore.lock_guard import LockGuard
from servercore.log import LogDispatcher
from servercore.threads import ThreadManager


class ComplexWorker:
    """Runs steps A-D under its own lock, logging from each."""

    def __init__(
        self,
        worker_id: int,
        log: LogDispatcher,
        stop_event: Optional[threading.Event] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.worker_id = worker_id
        self._log = log
        self._stop = stop_event if stop_event is not None else threading.Event()
        self._out = out if out is not None else sys.stdout
        self._lock = Lock()

    def _guard(self) -> LockGuard:
        return LockGuard(self._lock, type(self).__name__)

    def a(self) -> None:
        with self._guard():
            time.sleep(0.001)
            self._out.write("A  \n")
            self._log.info("[A] THREAD")
            self._log.system("[A] THREAD")

    def b(self) -> None:
        with self._guard():
            time.sleep(0.001)
            self._out.write("B  \n")
            self._log.system("[A] THREAD")
            self._log.info("[B] THREAD")

    def c(self) -> None:
        with self._guard():
            time.sleep(0.001)
            self._out.write("C  \n")
            self._log.error("[C] THREAD")

    def d(self) -> None:
        with self._guard():
            time.sleep(0.001)
            self._out.write("D  \n")
            self._log.system("[D] THREAD")
            self._log.info("[D] THREAD")

    def run_loop(self) -> None:
        """Repeat A-D until the stop event is set."""
        while not self._stop.is_set():
            self.a()
            self.b()
            self.c()
            self.d()
            time.sleep(0.005)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run logging worker threads.")
    parser.add_argument("--threads", type=int, default=8, help="number of workers")
    parser.add_argument(
        "--duration", type=float, default=None, help="seconds to run (default: until interrupted)"
    )
    parser.add_argument("--log-dir", default=None, help="directory that receives Logs/")
    parser.add_argument("--console", action="store_true", help="echo log lines to stdout")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    if args.threads < 1:
        raise SystemExit("--threads must be at least 1")

    log = LogDispatcher(args.log_dir, console=sys.stdout if args.console else None)
    log.start()

    stop = threading.Event()
    manager = ThreadManager()
    for worker_id in range(args.threads):
        manager.push(ComplexWorker(worker_id, log, stop).run_loop)

    try:
        stop.wait(args.duration)
    except KeyboardInterrupt:
        pass
    finally:
        stop.set()

    manager.join()
    log.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())