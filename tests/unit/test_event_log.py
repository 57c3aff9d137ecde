"""
Unit tests for safetyhalo.core.state.event_log.EventLogStore.

These tests validate:
- newest-first insertion
- eviction of the oldest entry beyond capacity
- loading stored entries respects capacity
"""

from __future__ import annotations

import pytest

from safetyhalo.core.state.event_log import DEFAULT_LOG_CAPACITY, EventLogStore
from safetyhalo.domain.models import ClassifierState, LogEntry, SafetyStatus


def _entry(i: int) -> LogEntry:
    return LogEntry(f"t{i}", SafetyStatus.SAFE, ClassifierState.NORMAL, f"s{i}")


def test_append_inserts_at_head() -> None:
    log = EventLogStore(capacity=5)
    for i in range(3):
        log.append(_entry(i))
    assert [e.timestamp for e in log.all()] == ["t2", "t1", "t0"]


def test_capacity_evicts_oldest() -> None:
    log = EventLogStore()
    for i in range(DEFAULT_LOG_CAPACITY + 1):
        log.append(_entry(i))

    entries = log.all()
    assert len(entries) == 100
    assert entries[0].timestamp == "t100"
    assert entries[-1].timestamp == "t1"


def test_load_truncates_to_capacity() -> None:
    log = EventLogStore(capacity=2)
    log.load([_entry(9), _entry(8), _entry(7)])
    assert [e.timestamp for e in log.all()] == ["t9", "t8"]


def test_clear_and_len() -> None:
    log = EventLogStore()
    log.append(_entry(1))
    assert len(log) == 1
    log.clear()
    assert len(log) == 0


def test_all_returns_copy() -> None:
    log = EventLogStore()
    log.append(_entry(1))
    log.all().clear()
    assert len(log) == 1


def test_invalid_capacity() -> None:
    with pytest.raises(ValueError):
        EventLogStore(capacity=0)
