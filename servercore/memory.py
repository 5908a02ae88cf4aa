"""Pooled memory blocks carved from one chunk, with optional guard bytes."""

from __future__ import annotations

import struct
import threading
from dataclasses import dataclass
from typing import List, Optional

from servercore.containers import LockStack

HEADER_SIZE = 4
GUARD_SIZE = 8
GUARD_PATTERN = 0xDF
BLOCK_SIZES = (32, 64, 128, 256, 512, 1024, 2048)
# Share of the chunk, by weight, handed to each block size.
RATIOS = (16, 18, 18, 10, 8, 8, 6)

_HEADER = struct.Struct("<I")


class MemoryCorruptionError(RuntimeError):
    """Raised when guard bytes around a block have been overwritten."""


@dataclass(eq=False)
class Block:
    """A header-prefixed region inside ``buffer`` starting at ``offset``.

    Layout: ``[header][data]``, or ``[header][guard][data][guard]`` in debug mode.
    """

    buffer: bytearray
    offset: int
    debug: bool = False

    @property
    def alloc_size(self) -> int:
        return _HEADER.unpack_from(self.buffer, self.offset)[0]

    @property
    def data_offset(self) -> int:
        return self.offset + HEADER_SIZE + (GUARD_SIZE if self.debug else 0)

    @property
    def data(self) -> memoryview:
        start = self.data_offset
        return memoryview(self.buffer)[start:start + self.alloc_size]


def real_size(alloc_size: int, debug: bool = False) -> int:
    """Bytes needed for a block of ``alloc_size`` including header and guards."""
    size = HEADER_SIZE + alloc_size
    if debug:
        size += GUARD_SIZE * 2
    return size


def attach_header(
    buffer: bytearray, offset: int, block_size: int, debug: bool = False
) -> Block:
    """Write a header (and guards in debug mode) at ``offset``."""
    if offset < 0 or offset + real_size(block_size, debug) > len(buffer):
        raise ValueError("block does not fit in buffer")
    _HEADER.pack_into(buffer, offset, block_size)
    if debug:
        under = offset + HEADER_SIZE
        over = under + GUARD_SIZE + block_size
        buffer[under:under + GUARD_SIZE] = bytes([GUARD_PATTERN]) * GUARD_SIZE
        buffer[over:over + GUARD_SIZE] = bytes([GUARD_PATTERN]) * GUARD_SIZE
    return Block(buffer, offset, debug)


def detach_header(block: Block, debug: Optional[bool] = None) -> int:
    """Read the block's size; in debug mode verify both guards first."""
    if debug is None:
        debug = block.debug
    size = block.alloc_size
    if debug:
        under_start = block.offset + HEADER_SIZE
        over_start = under_start + GUARD_SIZE + size
        guards = (
            block.buffer[under_start:under_start + GUARD_SIZE]
            + block.buffer[over_start:over_start + GUARD_SIZE]
        )
        if any(byte != GUARD_PATTERN for byte in guards):
            raise MemoryCorruptionError(
                f"guard bytes overwritten around block of {size} bytes"
            )
    return size


class MemoryPool:
    """A stack of reusable blocks of one size class, with usage counters."""

    def __init__(self, alloc_size: int) -> None:
        self.alloc_size = alloc_size
        self._blocks: LockStack[Block] = LockStack()
        self._count_lock = threading.Lock()
        self._use_count = 0
        self._remain_count = 0

    def pop(self) -> Optional[Block]:
        """Lend a block, or None when the pool is empty."""
        try:
            block = self._blocks.pop()
        except IndexError:
            return None
        with self._count_lock:
            self._use_count += 1
            self._remain_count -= 1
        return block

    def push(self, block: Block, counting: bool = True) -> None:
        """Return a block; ``counting=False`` adds a fresh one without a loan."""
        with self._count_lock:
            if counting:
                self._use_count -= 1
            self._remain_count += 1
        self._blocks.push(block)

    def remain_count(self) -> int:
        with self._count_lock:
            return self._remain_count

    def use_count(self) -> int:
        with self._count_lock:
            return self._use_count

    def total_count(self) -> int:
        with self._count_lock:
            return self._remain_count + self._use_count


class MemoryManager:
    """Hands out pooled blocks up to MAX_BLOCK_SIZE; larger ones are unpooled."""

    PAGE_SIZE = 4096
    CHUNK_SIZE = PAGE_SIZE * 16
    MIN_BLOCK_SIZE = 16
    MAX_BLOCK_SIZE = 2048

    def __init__(self, debug: bool = False) -> None:
        self._debug = debug
        self._pools: List[MemoryPool] = [MemoryPool(size) for size in BLOCK_SIZES]
        self._chunk = bytearray(self.CHUNK_SIZE)
        self._push_chunk()

    def allocate(self, size: int) -> Block:
        """A block with room for ``size`` bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size > self.MAX_BLOCK_SIZE:
            return self._fresh_block(size)
        block = self._pools[self.size_to_index(size)].pop()
        if block is None:
            return self._fresh_block(size)
        return block

    def release(self, block: Block) -> None:
        """Give a block back; pooled sizes return to their pool."""
        if block is None:
            raise ValueError("cannot release None")
        size = detach_header(block, self._debug)
        if size > self.MAX_BLOCK_SIZE:
            return
        self._pools[self.size_to_index(size)].push(block)

    def size_to_index(self, size: int) -> int:
        """Index of the smallest size class that holds ``size`` bytes."""
        for index, block_size in enumerate(BLOCK_SIZES):
            if size <= block_size:
                return index
        raise ValueError(f"no pool for {size} bytes")

    def pool(self, index: int) -> MemoryPool:
        return self._pools[index]

    def _fresh_block(self, size: int) -> Block:
        return attach_header(bytearray(real_size(size, self._debug)), 0, size, self._debug)

    def _push_chunk(self) -> None:
        total_weight = sum(RATIOS)
        cursor = 0
        remaining = self.CHUNK_SIZE
        for pool, block_size, ratio in zip(self._pools, BLOCK_SIZES, RATIOS):
            block_real = real_size(block_size, self._debug)
            count = (self.CHUNK_SIZE * ratio // total_weight) // block_real
            for _ in range(count):
                if remaining < block_real:
                    return
                block = attach_header(self._chunk, cursor, block_size, self._debug)
                pool.push(block, counting=False)
                cursor += block_real
                remaining -= block_real