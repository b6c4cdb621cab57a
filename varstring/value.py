"""
StringValue Facade

A byte string value whose storage strategy is chosen from its length at
construction time (see varstring.config for the thresholds) and kept for
the life of the value unless a whole-value assignment replaces it.

Copy rules follow the active representation:
- Inline: byte copy
- Exclusive: new heap block, bytes duplicated
- Shared: the resource handle is shared, nothing is copied

Mutable access (index, item assignment) on a Shared value always detaches
first. Everything that only reads (equality, raw_data, display, len,
item read) goes through raw_data and never detaches.
"""

import sys
from typing import Optional, TextIO, Union

from varstring import config
from varstring.errors import AllocationError, IndexOutOfRange
from varstring.representations import (
    Kind, ByteRef, EMPTY, InlineRepresentation, ExclusiveRepresentation,
    SharedRepresentation,
)
from varstring.trace import trace, TRACE_DETAIL

Source = Union[str, bytes, bytearray, memoryview, 'StringValue']


def _encode(source) -> bytes:
    if isinstance(source, str):
        return source.encode(config.ACTIVE.encoding)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    raise TypeError(
        f"StringValue requires str, bytes-like or StringValue, got {type(source).__name__}"
    )


class StringValue:
    """Variable-representation byte string.

    StringValue()            empty value
    StringValue("text")      representation picked by byte length
    StringValue(other)       copy using other's copy rule
    """

    __hash__ = None

    def __init__(self, source: Optional[Source] = None):
        self._rep = EMPTY
        if source is None:
            return
        if isinstance(source, StringValue):
            self._rep = source._rep.copy()
            return

        data = _encode(source)
        thresholds = config.active_thresholds()
        kind = thresholds.select(len(data))
        trace(TRACE_DETAIL, "NEW", f"{kind.value}, {len(data)} byte(s)")
        if kind is Kind.INLINE:
            self._rep = InlineRepresentation(thresholds.top, data)
        elif kind is Kind.EXCLUSIVE:
            self._rep = ExclusiveRepresentation(data)
        else:
            self._rep = SharedRepresentation.from_bytes(data)

    @property
    def kind(self) -> Kind:
        """The active representation kind."""
        return self._rep.kind

    @property
    def representation(self):
        """The active representation object (read it, don't mutate it)."""
        return self._rep

    def assign(self, other: Source) -> 'StringValue':
        """Make this value a copy of `other`.

        If the kinds differ the current representation is dropped and
        other's kind is copy-constructed in its place. If they match, the
        representation's own assignment runs. On AllocationError the value
        is left empty.
        """
        if not isinstance(other, StringValue):
            other = StringValue(other)
        if other is self:
            return self

        if self._rep.kind is not other._rep.kind:
            trace(TRACE_DETAIL, "ASSIGN",
                  f"rebuild {self._rep.kind.value} -> {other._rep.kind.value}")
            self._rep = EMPTY
            self._rep = other._rep.copy()
        else:
            try:
                self._rep.assign(other._rep)
            except AllocationError:
                self._rep = EMPTY
                raise
        return self

    def index(self, i: int) -> ByteRef:
        """Mutable reference to byte `i`.

        Shared values detach before the reference is returned. Raises
        IndexOutOfRange when i is negative or >= length(); the value is
        left untouched in that case.
        """
        return self._rep.index(i, config.ACTIVE.encoding)

    def try_index(self, i: int) -> Optional[ByteRef]:
        """Like index(), but returns None instead of raising when out of range."""
        if not isinstance(i, int) or i < 0 or i >= self._rep.length():
            return None
        return self.index(i)

    def length(self) -> int:
        return self._rep.length()

    def raw_data(self) -> memoryview:
        """Read-only view of the content. Never copies or detaches."""
        return self._rep.raw_data()

    data = raw_data

    def text(self) -> str:
        return bytes(self._rep.raw_data()).decode(config.ACTIVE.encoding, errors="replace")

    def display(self, sink: Optional[TextIO] = None):
        """Write the content as text to `sink` (stdout by default)."""
        if sink is None:
            sink = sys.stdout
        sink.write(self.text())

    def __len__(self):
        return self._rep.length()

    def __getitem__(self, i: int) -> int:
        if not isinstance(i, int):
            raise TypeError(f"StringValue indices must be integers, got {type(i).__name__}")
        view = self._rep.raw_data()
        if i < 0 or i >= len(view):
            raise IndexOutOfRange(i, len(view))
        return view[i]

    def __setitem__(self, i: int, value):
        self.index(i).set(value)

    def __eq__(self, other):
        if not isinstance(other, StringValue):
            return NotImplemented
        return equals(self, other)

    def __bytes__(self):
        return bytes(self._rep.raw_data())

    def __str__(self):
        return self.text()

    def __repr__(self):
        return f"StringValue(kind={self.kind.value}, length={self.length()}, {bytes(self)!r})"

    def __copy__(self):
        return StringValue(self)

    def __deepcopy__(self, memo):
        return StringValue(self)


def equals(lhs: StringValue, rhs: StringValue) -> bool:
    """Content equality through raw_data; never detaches shared values."""
    if lhs is rhs:
        return True
    left = lhs.raw_data()
    right = rhs.raw_data()
    if len(left) != len(right):
        return False
    for x, y in zip(left, right):
        if x != y:
            return False
    return True


def is_sharing(lhs: StringValue, rhs: StringValue) -> bool:
    """True iff both values are Shared and hold the very same resource."""
    if lhs.kind is not Kind.SHARED or rhs.kind is not Kind.SHARED:
        return False
    return lhs.representation.resource is rhs.representation.resource


def display(value: StringValue, sink: Optional[TextIO] = None):
    value.display(sink)
