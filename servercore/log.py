"""Asynchronous log dispatcher writing daily UTF-8 log files."""

from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import List, Optional, TextIO, Tuple, Union

from servercore.containers import EventLockQueue
from servercore.timer import Clock
from servercore.utils import base_path

FLUSH_SIZE = 10
FLUSH_INTERVAL = 2.0


class LogType(IntEnum):
    INFO = 0
    SYSTEM = 1
    WARNING = 2
    ERROR = 3


_LABELS = {
    LogType.INFO: " INFO    ",
    LogType.SYSTEM: " SYSTEM  ",
    LogType.WARNING: " WARNING ",
    LogType.ERROR: " ERROR   ",
}

_COLORS = {
    LogType.INFO: "\033[90m",
    LogType.SYSTEM: "\033[97m",
    LogType.WARNING: "\033[93m",
    LogType.ERROR: "\033[91m",
}

_RESET = "\033[0m"


@dataclass
class LogMessage:
    """One log record."""

    log_type: LogType = LogType.INFO
    message: str = ""
    timestamp: str = ""
    thread_id: int = field(default_factory=threading.get_ident)
    function_name: Optional[str] = None

    def format(self) -> str:
        """The record as a single line ending in a newline."""
        return (
            f"{self.timestamp}{_LABELS[self.log_type]}"
            f"{str(self.thread_id):<6}--- "
            f"{self.function_name or '':<30}"
            f" : {self.message}\n"
        )


_STOP = object()


def _caller_name() -> str:
    return sys._getframe(2).f_code.co_name


class LogDispatcher:
    """Queues formatted log lines and writes them from a background thread.

    Lines are buffered and flushed every FLUSH_SIZE lines or FLUSH_INTERVAL
    seconds; the file rolls over when the date changes.
    """

    def __init__(
        self,
        directory: Union[str, Path, None] = None,
        clock: Optional[Clock] = None,
        console: Optional[TextIO] = None,
    ) -> None:
        root = Path(directory) if directory is not None else Path(base_path())
        self._log_dir = root / "Logs"
        self._clock = clock if clock is not None else Clock()
        self._console = console
        self._queue: EventLockQueue = EventLockQueue()
        self._buffer: List[str] = []
        self._file: Optional[TextIO] = None
        self._path: Optional[Path] = None
        self._file_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._writing = False
        self._last_flush = time.monotonic()

    @property
    def log_path(self) -> Optional[Path]:
        """The file currently written to, once started."""
        return self._path

    def start(self) -> None:
        """Open the log file and start the writer thread."""
        with self._file_lock:
            self._create_file()
        self._writing = True
        self._last_flush = time.monotonic()
        self._thread = threading.Thread(
            target=self.process, name="log-dispatcher", daemon=True
        )
        self._thread.start()
        self.push_log(LogType.SYSTEM, "LogManager instance initialized", "LogDispatcher.start")

    def shutdown(self) -> None:
        """Stop the writer after the queued lines and close the file."""
        self._writing = False
        self._queue.push(_STOP)
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None
        with self._file_lock:
            self._close_file()

    def push_log(
        self, log_type: LogType, message: str, function_name: Optional[str] = None
    ) -> None:
        record = LogMessage(
            log_type,
            message,
            self._clock.format_time(),
            threading.get_ident(),
            function_name,
        )
        self._queue.push((log_type, record.format()))

    def process(self) -> None:
        """Write queued lines until shutdown is requested."""
        while True:
            item = self._queue.pop()
            if item is _STOP:
                break
            log_type, text = item
            if self._console is not None:
                self._console.write(f"{_COLORS[log_type]}{text}{_RESET}")
            with self._file_lock:
                if self._clock.is_new_day():
                    self._close_file()
                    self._create_file()
                self._buffer.append(text)
                now = time.monotonic()
                if len(self._buffer) >= FLUSH_SIZE or now - self._last_flush >= FLUSH_INTERVAL:
                    self._flush()
                    self._last_flush = now

    def info(self, message: str) -> None:
        self.push_log(LogType.INFO, message, _caller_name())

    def system(self, message: str) -> None:
        self.push_log(LogType.SYSTEM, message, _caller_name())

    def warning(self, message: str) -> None:
        self.push_log(LogType.WARNING, message, _caller_name())

    def error(self, message: str) -> None:
        self.push_log(LogType.ERROR, message, _caller_name())

    def _create_file(self) -> None:
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._log_dir / f"Serverlog_{self._clock.format_date('_')}.log"
        self._file = open(self._path, "a", encoding="utf-8")
        if self._file.tell() == 0:
            self._file.write("\ufeff")

    def _flush(self) -> None:
        if self._file is None:
            return
        self._file.writelines(self._buffer)
        self._file.flush()
        self._buffer.clear()

    def _close_file(self) -> None:
        if self._file is not None:
            self._flush()
            self._file.close()
            self._file = None


def _pending(items: List[Tuple[LogType, str]]) -> int:
    return len(items)