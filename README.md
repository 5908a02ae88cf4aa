# servercore

These are building blocks for a multithreaded server. The package uses only the standard library.

## Modules

- `servercore.timer`
  - `Clock` formats the local time as `yyyy/mm/dd HH:MM:SS.mmm` with `format_time()`, and the local date with `format_date()`. The separators can be changed.
  - `is_new_day()` returns `True` once after each change of date.
  - `time_diff()` gives the milliseconds between two `time.monotonic_ns()` stamps.
  - `Timer` is a millisecond countdown. It has `start`, `is_expired`, `reset`, `elapsed` and `remaining`.
- `servercore.utils`
  - `get_random(low, high)` returns a uniform value. It returns an integer when both bounds are integers and raises `ValueError` when `low > high`.
  - `remove_last_path_component` and `go_up_directories` work on both `\` and `/` separators.
  - `base_path(executable, debug)` returns the executable's folder. With `debug=True` it returns the folder three levels up.
- `servercore.deadlock`
  - `Lock` is a plain mutex.
  - `DeadlockDetector` keeps, for each thread, the locks that thread holds. It also keeps a shared graph of the order in which locks are taken.
  - A request that would close a cycle in that graph raises `DeadlockError`. The error carries a text `report` and the `cycle`.
  - `default_detector()` returns the process-wide detector.
- `servercore.lock_guard`
  - `LockGuard` is a context manager. It reports the request, the acquire and the release to a detector.
  - `UniqueLockGuard` locks when it is created. It can then be unlocked and locked again, and `owns()` tells whether it holds the lock. It releases the lock when its `with` block ends.
- `servercore.containers`
  - `EventLockQueue` is a FIFO queue whose `pop()` blocks until an item arrives.
  - `LockStack` is a thread-safe stack. Its `pop()` and `top()` raise `IndexError` when the stack is empty.
- `servercore.threads`
  - `ThreadManager.push(callback)` runs each callback on its own thread. When the callback finishes, that thread's lock records are cleared.
  - `join()` waits for all threads, including threads started while it waits.
- `servercore.memory`
  - `MemoryManager(debug=False)` splits one 64 KiB chunk into pools by weight. The block sizes are 32, 64, 128, 256, 512, 1024 and 2048 bytes.
  - `allocate(size)` returns a `Block`. It is pooled for sizes up to 2048 bytes and freshly made when the pool is empty or the size is larger.
  - `release(block)` returns a pooled block to its pool.
  - Each `Block` has a 4-byte size header. In debug mode it also has 8-byte guards filled with `0xDF` on both sides of the data. `detach_header` raises `MemoryCorruptionError` when a guard has been overwritten.
  - `MemoryPool` reports `remain_count`, `use_count` and `total_count`.
- `servercore.log`
  - `LogDispatcher(directory, clock, console)` formats each `LogMessage` as a line and puts it on a queue. A background thread writes the queued lines to `<directory>/Logs/Serverlog_yyyy_mm_dd.log`.
  - The file is UTF-8 and starts with a BOM.
  - Lines are buffered and flushed every 10 lines or every 2 seconds. A new file is opened when the date changes.
  - If a console stream is given, each line is also written to it, coloured by `LogType` with ANSI codes.
  - Use `info`, `system`, `warning` and `error` to log. Each records the name of the calling function.
- `servercore.gameserver`
  - `ComplexWorker` runs steps `a`–`d` in a loop until its stop event is set. Each step holds the worker's `LockGuard`, prints a letter and logs.

## Install

```
pip install .
```

## Example

```python
from servercore.deadlock import Lock
from servercore.lock_guard import LockGuard
from servercore.log import LogDispatcher

log = LogDispatcher("logs")
log.start()

lock = Lock()
with LockGuard(lock, "Inventory"):
    log.info("inventory updated")

log.shutdown()
```

## Demo

```
servercore-demo --threads 8 --duration 5 --log-dir . --console
```

The demo starts `--threads` workers, 8 by default. It runs for `--duration` seconds, or until interrupted when no duration is given. Logs are written under `--log-dir`, which defaults to the executable's folder. `--console` also echoes the log lines to stdout.

## What it does not do

- The package has no network layer: it opens no sockets and serves no clients.
- It does not write crash dumps.
- Memory blocks are Python `bytearray` regions, not raw memory.

## Tests

```
pip install .[test]
pytest
```