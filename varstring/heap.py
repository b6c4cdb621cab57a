"""
varstring Heap

Owning byte buffers for the heap-backed representations (Exclusive and the
Shared resource). Inline values never come here.

Each allocation returns a Block wrapping a bytearray. A weakref finalizer on
the Block returns its bytes to the live counters when the last reference to
it goes away, so the statistics follow value lifetime.

An optional byte limit turns the heap into a bounded pool; exceeding it
raises AllocationError just like the interpreter running out of memory.
"""

import weakref
from dataclasses import dataclass, asdict
from typing import Optional

from varstring.errors import AllocationError
from varstring.trace import trace, TRACE_OPS


@dataclass
class HeapStats:
    """Allocation counters for one Heap"""
    total_allocations: int = 0
    total_bytes: int = 0
    live_buffers: int = 0
    live_bytes: int = 0
    failed_allocations: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


class Block:
    """A heap-allocated, fixed-size byte buffer."""

    __slots__ = ('data', '__weakref__')

    def __init__(self, data: bytearray):
        self.data = data

    @property
    def size(self) -> int:
        return len(self.data)


class Heap:
    """Generic heap with allocation accounting."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit
        self._stats = HeapStats()

    def set_limit(self, limit: Optional[int]):
        """Cap live bytes at `limit` (None removes the cap)."""
        if limit is not None and limit < 0:
            raise ValueError(f"Heap limit must be non-negative, got {limit}")
        self.limit = limit

    def allocate(self, size: int, source: bytes = b"", purpose: str = "buffer") -> Block:
        """Allocate a zero-filled block of `size` bytes, then copy `source` in.

        Raises:
            AllocationError: If the limit would be exceeded or memory is exhausted
            ValueError: If size is negative or source does not fit
        """
        if size < 0:
            raise ValueError(f"Allocation size must be non-negative, got {size}")
        if len(source) > size:
            raise ValueError(f"Source of {len(source)} byte(s) does not fit in {size}")

        if self.limit is not None and self._stats.live_bytes + size > self.limit:
            self._fail(size, f"heap limit of {self.limit} byte(s) reached")

        try:
            data = bytearray(size)
        except MemoryError:
            self._fail(size, "out of memory")
        data[:len(source)] = source

        block = Block(data)
        self._stats.total_allocations += 1
        self._stats.total_bytes += size
        self._stats.live_buffers += 1
        self._stats.live_bytes += size
        weakref.finalize(block, self._release, size)
        trace(TRACE_OPS, "ALLOC", f"{size} byte(s) for {purpose}")
        return block

    def _release(self, size: int):
        self._stats.live_buffers -= 1
        self._stats.live_bytes -= size
        trace(TRACE_OPS, "FREE", f"{size} byte(s)")

    def _fail(self, size: int, reason: str):
        self._stats.failed_allocations += 1
        trace(TRACE_OPS, "ALLOC", f"failed: {size} byte(s), {reason}")
        raise AllocationError(size, reason)

    def stats(self) -> HeapStats:
        """Snapshot of the current counters."""
        return HeapStats(**self._stats.as_dict())

    def reset_stats(self):
        """Zero the cumulative counters; live counters keep tracking."""
        self._stats.total_allocations = 0
        self._stats.total_bytes = 0
        self._stats.failed_allocations = 0


default_heap = Heap()
