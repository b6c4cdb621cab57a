"""
varstring: variable-representation byte strings

StringValue picks one of three storage strategies from the content length
and hides the choice behind a single value interface.

Package Structure:
    varstring/
    ├── __init__.py         # Package exports (this file)
    ├── errors.py           # StringValueError, IndexOutOfRange, AllocationError, ConfigError
    ├── config.py           # Thresholds and TOML loading (ACTIVE, configure once at startup)
    ├── trace.py            # Trace levels and [VS:*] stderr output
    ├── heap.py             # Heap, Block, HeapStats (owning buffers)
    ├── representations.py  # Kind, Inline/Exclusive/Shared, Resource, ByteRef
    ├── value.py            # StringValue, equals, is_sharing, display
    └── diagnostics.py      # describe, dump_value, dump_stats
"""

from varstring.errors import (
    StringValueError, IndexOutOfRange, AllocationError, ConfigError,
)
from varstring import config
from varstring.config import Config, Thresholds, load_config, configure
from varstring.heap import Heap, HeapStats
from varstring.representations import Kind, ByteRef
from varstring.trace import (
    set_trace_level, get_trace_level, TRACE_NONE, TRACE_OPS, TRACE_DETAIL,
)
from varstring.value import StringValue, equals, is_sharing, display
from varstring.diagnostics import describe, dump_value, dump_stats

set_trace_level(config.ACTIVE.trace_level)

__all__ = [
    'StringValue',
    'Kind',
    'ByteRef',
    'equals',
    'is_sharing',
    'display',
    'Config',
    'Thresholds',
    'load_config',
    'configure',
    'Heap',
    'HeapStats',
    'set_trace_level',
    'get_trace_level',
    'TRACE_NONE',
    'TRACE_OPS',
    'TRACE_DETAIL',
    'describe',
    'dump_value',
    'dump_stats',
    'StringValueError',
    'IndexOutOfRange',
    'AllocationError',
    'ConfigError',
]
