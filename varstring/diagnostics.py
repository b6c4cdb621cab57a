"""
varstring Diagnostics

Human-readable views of values and heap state:
- describe: representation details of one value as a dict
- dump_value: print one value's details
- dump_stats: print heap allocation counters

Output lines are prefixed with [VS:VALUE] / [VS:STATS] so they are easy to
grep out of mixed program output.
"""

import sys
from typing import Optional, TextIO

from varstring import heap as heap_module
from varstring.representations import Kind
from varstring.value import StringValue


def describe(value: StringValue) -> dict:
    """Return kind, length and capacity (plus sharing details for Shared)."""
    rep = value.representation
    info = {
        'kind': rep.kind.value,
        'length': rep.length(),
        'capacity': rep.capacity(),
    }
    if rep.kind is Kind.SHARED:
        info['use_count'] = rep.use_count()
        info['resource_id'] = f"{id(rep.resource):#x}"
    return info


def dump_value(value: StringValue, file: Optional[TextIO] = None):
    """Print a one-line description of a value"""
    if file is None:
        file = sys.stdout
    fields = " ".join(f"{key}={val}" for key, val in describe(value).items())
    print(f"[VS:VALUE] {fields}", file=file)


def dump_stats(heap: Optional[heap_module.Heap] = None, file: Optional[TextIO] = None):
    """Print current heap statistics"""
    if heap is None:
        heap = heap_module.default_heap
    if file is None:
        file = sys.stdout
    stats = heap.stats()
    print("[VS:STATS] === Heap Statistics ===", file=file)
    print(f"[VS:STATS] total_allocations: {stats.total_allocations}, "
          f"total_bytes: {stats.total_bytes}", file=file)
    print(f"[VS:STATS] live_buffers: {stats.live_buffers}, "
          f"live_bytes: {stats.live_bytes}", file=file)
    print(f"[VS:STATS] failed_allocations: {stats.failed_allocations}", file=file)
    if heap.limit is not None:
        print(f"[VS:STATS] limit: {heap.limit}", file=file)
