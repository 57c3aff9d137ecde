"""
Unit and stress tests for safetyhalo.runtime.event_bus.EventBus.

Unit tests validate:
- publish_evaluation enqueues events when capacity is available
- publish_evaluation does not raise when the queue is full (drop policy)

Stress tests validate:
- publish_evaluation is safe under concurrent calls from multiple threads
- the bus does not deadlock or crash under high contention

Notes
-----
Thread stress tests are probabilistic: passing increases confidence but does not
prove the absence of races. Run repeatedly for higher confidence.
"""

from __future__ import annotations

import threading
from datetime import datetime
from queue import Empty
from typing import List

import pytest

from safetyhalo.core.context.assembler import ContextAssembler
from safetyhalo.core.gate.fallback import COMMUNICATION_FALLBACK_REPORT
from safetyhalo.domain.events import EvaluationEvent, PipelinePhase
from safetyhalo.domain.models import ClassifierState, LogEntry, SafetyStatus
from safetyhalo.runtime.event_bus import EventBus
from safetyhalo.simulation.scenarios import INITIAL_SENSORS

_ASSEMBLER = ContextAssembler(room_id="R1")


def _mk_event(i: int) -> EvaluationEvent:
    """
    Create a minimal EvaluationEvent whose notes carry `i`.
    """
    ctx = _ASSEMBLER.assemble(INITIAL_SENSORS, ClassifierState.NORMAL, 0.9, notes=f"e{i}", now=datetime(2026, 1, 1))
    return EvaluationEvent(
        context=ctx,
        report=COMMUNICATION_FALLBACK_REPORT,
        escalated=True,
        oracle_failed=True,
        alert_handled=True,
        log_entry=LogEntry("2026-01-01 00:00:00", SafetyStatus.SAFE, ClassifierState.NORMAL, "T:22.8 G:8"),
        phases=(PipelinePhase.IDLE,),
    )


def _drain_queue(q, limit: int = 10_000) -> List[EvaluationEvent]:
    out: List[EvaluationEvent] = []
    for _ in range(limit):
        try:
            out.append(q.get_nowait())
        except Empty:
            break
    return out


def test_publish_evaluation_enqueues_event_when_space_available() -> None:
    bus = EventBus()
    bus.publish_evaluation(_mk_event(1))
    assert bus.evaluation_events_q.get_nowait().context.notes == "e1"


def test_publish_evaluation_drops_when_full_without_raising() -> None:
    bus = EventBus()
    ev = _mk_event(0)
    for _ in range(bus.evaluation_events_q.maxsize):
        bus.evaluation_events_q.put_nowait(ev)

    bus.publish_evaluation(_mk_event(999999))

    assert bus.evaluation_events_q.qsize() == bus.evaluation_events_q.maxsize


@pytest.mark.stress
def test_event_bus_publish_evaluation_concurrent_producers() -> None:
    """
    Stress-test publish_evaluation from multiple threads concurrently.

    Drops are expected once producers outrun the (absent) consumer.
    """
    bus = EventBus()
    events = [_mk_event(i) for i in range(200)]
    start = threading.Barrier(8)
    errors: List[BaseException] = []

    def producer() -> None:
        try:
            start.wait()
            for k in range(2000):
                bus.publish_evaluation(events[k % len(events)])
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=producer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert all(not t.is_alive() for t in threads), "A producer thread did not finish (possible deadlock)"
    if errors:
        raise AssertionError(f"Concurrency test caught exceptions: {errors!r}")

    assert bus.evaluation_events_q.qsize() <= bus.evaluation_events_q.maxsize
    drained = _drain_queue(bus.evaluation_events_q, limit=5000)
    assert all(isinstance(e, EvaluationEvent) for e in drained)
