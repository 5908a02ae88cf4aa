"""Server core toolkit: deadlock-detecting locks, thread manager, pooled memory blocks, timers and an asynchronous file logger."""

__version__ = "0.1.0"