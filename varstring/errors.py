"""
varstring Exceptions

All errors raised by the package derive from StringValueError so callers
can catch the whole family at once. The two value-level errors also derive
from the matching builtin (IndexError, MemoryError) so generic handlers
keep working.
"""

OUT_OF_RANGE_MESSAGE = "The accessing index is out of range."


class StringValueError(Exception):
    """Base exception for varstring errors"""
    pass


class IndexOutOfRange(StringValueError, IndexError):
    """Indexed access at or past the end of the value"""

    def __init__(self, index: int, length: int):
        super().__init__(OUT_OF_RANGE_MESSAGE)
        self.index = index
        self.length = length


class AllocationError(StringValueError, MemoryError):
    """The heap could not provide a buffer"""

    def __init__(self, size: int, reason: str = ""):
        message = f"Failed to allocate {size} byte(s)"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.size = size


class ConfigError(StringValueError):
    """Invalid threshold or encoding configuration"""
    pass
