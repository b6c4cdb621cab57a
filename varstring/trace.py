"""
varstring Trace Output

Conditional trace lines on stderr, gated by a process-wide level:

    TRACE_NONE   = 0   No tracing output
    TRACE_OPS    = 1   Heap allocations, releases, detaches, failures
    TRACE_DETAIL = 2   Every copy and assignment

Lines look like "[VS:ALLOC] 300 byte(s) for shared resource".
"""

import sys

TRACE_NONE = 0
TRACE_OPS = 1
TRACE_DETAIL = 2

_trace_level = TRACE_NONE


def set_trace_level(level: int):
    """Set the current trace verbosity."""
    global _trace_level
    if level < TRACE_NONE:
        raise ValueError(f"Trace level must be >= {TRACE_NONE}, got {level}")
    _trace_level = level


def get_trace_level() -> int:
    return _trace_level


def trace(level: int, tag: str, message: str):
    """Print a trace line if the current level is high enough."""
    if _trace_level >= level:
        print(f"[VS:{tag}] {message}", file=sys.stderr)
