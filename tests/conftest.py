"""
Pytest configuration and fixtures for varstring tests.

Provides reusable fixtures for:
- A fresh, isolated heap per test
- Sample content for each representation kind
- Trace level control
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from varstring import config as config_module
from varstring import heap as heap_module
from varstring import trace as trace_module


# A leading newline, then five indented rows of a repeated word (323 bytes).
def _demo_block(word: str) -> str:
    row = " ".join([word] * 10)
    return "\n" + "".join(f"    {row}\n" for _ in range(5)) + "  "


@pytest.fixture
def fresh_heap(monkeypatch):
    """
    Replace the default heap with an empty one for the duration of a test.

    Usage:
        def test_x(fresh_heap):
            StringValue("x" * 100)
            assert fresh_heap.stats().total_allocations == 1
    """
    heap = heap_module.Heap()
    monkeypatch.setattr(heap_module, "default_heap", heap)
    return heap


@pytest.fixture
def short_text():
    return "Hello, world!"


@pytest.fixture
def medium_text():
    return "Hello, there are still many things to do."


@pytest.fixture
def long_text():
    return _demo_block("YHSPY")


@pytest.fixture
def other_long_text():
    return _demo_block("HELLO")


@pytest.fixture
def trace_level():
    """
    Fixture that returns a function to set the trace level; the previous
    level is restored afterwards.

    Usage:
        trace_level(TRACE_OPS)
    """
    previous = trace_module.get_trace_level()
    yield trace_module.set_trace_level
    trace_module.set_trace_level(previous)


@pytest.fixture
def unlocked_config(monkeypatch):
    """
    Fixture that returns config.configure with the startup lock released.
    The previous configuration, lock state and trace level are restored
    afterwards.

    Usage:
        unlocked_config(Config(thresholds=Thresholds(top=4, bottom=8)))
    """
    monkeypatch.setattr(config_module, "ACTIVE", config_module.ACTIVE)
    monkeypatch.setattr(config_module, "_locked", False)
    previous = trace_module.get_trace_level()
    yield config_module.configure
    trace_module.set_trace_level(previous)
