"""
varstring Representations

The closed set of storage strategies behind StringValue. Exactly one is
active per value:

    Kind.EMPTY      no storage (default construction, failed allocation)
    Kind.INLINE     bytes live in the value's own fixed-capacity array
    Kind.EXCLUSIVE  private heap block, deep-copied on every copy/assign
    Kind.SHARED     handle to a Resource, shared until a mutating access

Every representation offers the same interface: length, capacity,
raw_data, index, copy, assign. The facade dispatches through it without
inspecting types.

Shared resources are not safe for concurrent mutation. Holder tracking
and detach assume a single thread or external locking.
"""

import weakref
from enum import Enum
from typing import Optional

from varstring import heap
from varstring.errors import IndexOutOfRange
from varstring.trace import trace, TRACE_OPS, TRACE_DETAIL


class Kind(Enum):
    EMPTY = "empty"
    INLINE = "inline"
    EXCLUSIVE = "exclusive"
    SHARED = "shared"


def to_byte(value, encoding: str = "utf-8") -> int:
    """Coerce an int, 1-byte bytes, or 1-byte str into a byte value."""
    if isinstance(value, str):
        value = value.encode(encoding)
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 1:
            raise ValueError(f"Expected a single byte, got {len(value)}")
        return value[0]
    if isinstance(value, int):
        if not 0 <= value <= 255:
            raise ValueError(f"Byte value must be in 0..255, got {value}")
        return value
    raise TypeError(f"Cannot store {type(value).__name__} as a byte")


class ByteRef:
    """Mutable reference to one byte of a representation's storage.

    The reference is bound to the storage that was current when it was
    handed out; later detaches of the value do not move it. `_owner` keeps
    the heap block (or inline representation) alive while the reference is.
    """

    __slots__ = ('_owner', '_data', 'position', 'encoding')

    def __init__(self, owner, data: bytearray, position: int, encoding: str = "utf-8"):
        self._owner = owner
        self._data = data
        self.position = position
        self.encoding = encoding

    def get(self) -> int:
        return self._data[self.position]

    def set(self, value):
        self._data[self.position] = to_byte(value, self.encoding)

    def __int__(self):
        return self.get()

    def __repr__(self):
        return f"ByteRef(position={self.position}, value={self.get()!r})"


def _check_index(index: int, length: int):
    if not isinstance(index, int):
        raise TypeError(f"Index must be an integer, got {type(index).__name__}")
    if index < 0 or index >= length:
        raise IndexOutOfRange(index, length)


class EmptyRepresentation:
    """No storage. Behaves as a zero-length value."""

    kind = Kind.EMPTY

    def length(self) -> int:
        return 0

    def capacity(self) -> int:
        return 0

    def raw_data(self) -> memoryview:
        return memoryview(b"")

    def index(self, index: int, encoding: str = "utf-8") -> ByteRef:
        _check_index(index, 0)

    def copy(self) -> 'EmptyRepresentation':
        return self

    def assign(self, other: 'EmptyRepresentation'):
        pass


EMPTY = EmptyRepresentation()


class InlineRepresentation:
    """Small-string storage held directly in the value."""

    kind = Kind.INLINE

    def __init__(self, capacity: int, source: bytes = b""):
        if len(source) > capacity:
            raise ValueError(
                f"Inline storage holds at most {capacity} byte(s), got {len(source)}"
            )
        self.storage = bytearray(capacity)
        self.storage[:len(source)] = source
        self.size = len(source)

    def length(self) -> int:
        return self.size

    def capacity(self) -> int:
        return len(self.storage)

    def raw_data(self) -> memoryview:
        return memoryview(self.storage)[:self.size].toreadonly()

    def index(self, index: int, encoding: str = "utf-8") -> ByteRef:
        _check_index(index, self.size)
        return ByteRef(self, self.storage, index, encoding)

    def copy(self) -> 'InlineRepresentation':
        trace(TRACE_DETAIL, "COPY", f"inline, {self.size} byte(s)")
        return InlineRepresentation(self.capacity(), self.raw_data())

    def assign(self, other: 'InlineRepresentation'):
        if other is self:
            return
        trace(TRACE_DETAIL, "ASSIGN", f"inline, {other.size} byte(s)")
        self.storage[:other.size] = other.raw_data()
        self.size = other.size


class ExclusiveRepresentation:
    """Eagerly copied storage: one private heap block per instance."""

    kind = Kind.EXCLUSIVE

    def __init__(self, source: bytes):
        self.block = heap.default_heap.allocate(len(source), source, "exclusive buffer")
        self.size = len(source)

    def length(self) -> int:
        return self.size

    def capacity(self) -> int:
        return self.block.size

    def raw_data(self) -> memoryview:
        return memoryview(self.block.data)[:self.size].toreadonly()

    def index(self, index: int, encoding: str = "utf-8") -> ByteRef:
        _check_index(index, self.size)
        return ByteRef(self.block, self.block.data, index, encoding)

    def copy(self) -> 'ExclusiveRepresentation':
        trace(TRACE_DETAIL, "COPY", f"exclusive, {self.size} byte(s)")
        return ExclusiveRepresentation(self.raw_data())

    def assign(self, other: 'ExclusiveRepresentation'):
        if other is self:
            return
        trace(TRACE_DETAIL, "ASSIGN", f"exclusive, {other.size} byte(s)")
        block = heap.default_heap.allocate(other.size, other.raw_data(), "exclusive buffer")
        self.block = block
        self.size = other.size


class Resource:
    """Heap block shared by any number of SharedRepresentations."""

    def __init__(self, source: bytes):
        self.block = heap.default_heap.allocate(len(source), source, "shared resource")
        self.size = len(source)
        self._holders = weakref.WeakSet()

    @property
    def capacity(self) -> int:
        return self.block.size

    def use_count(self) -> int:
        """Number of live representations holding this resource."""
        return len(self._holders)


class SharedRepresentation:
    """Copy-on-write storage over a reference-counted Resource."""

    kind = Kind.SHARED

    def __init__(self, resource: Resource):
        self.resource: Optional[Resource] = None
        self._bind(resource)

    @classmethod
    def from_bytes(cls, source: bytes) -> 'SharedRepresentation':
        return cls(Resource(source))

    def _bind(self, resource: Resource):
        if self.resource is not None:
            self.resource._holders.discard(self)
        self.resource = resource
        resource._holders.add(self)

    def length(self) -> int:
        return self.resource.size

    def capacity(self) -> int:
        return self.resource.capacity

    def use_count(self) -> int:
        return self.resource.use_count()

    def raw_data(self) -> memoryview:
        return memoryview(self.resource.block.data)[:self.resource.size].toreadonly()

    def detach(self):
        """Replace the resource with a private copy of its bytes.

        Always copies, even when this is the only holder. On allocation
        failure the old resource stays bound.
        """
        private = Resource(self.raw_data())
        trace(TRACE_OPS, "DETACH",
              f"{private.size} byte(s), left {self.resource.use_count() - 1} other holder(s)")
        self._bind(private)

    def index(self, index: int, encoding: str = "utf-8") -> ByteRef:
        _check_index(index, self.resource.size)
        self.detach()
        block = self.resource.block
        return ByteRef(block, block.data, index, encoding)

    def copy(self) -> 'SharedRepresentation':
        trace(TRACE_DETAIL, "SHARE", f"copy, {self.resource.use_count() + 1} holder(s)")
        return SharedRepresentation(self.resource)

    def assign(self, other: 'SharedRepresentation'):
        if other is self:
            return
        trace(TRACE_DETAIL, "SHARE", f"assign, {other.resource.use_count() + 1} holder(s)")
        self._bind(other.resource)
