"""
Unit tests for safetyhalo.services.controller.EvaluationController.

These tests validate orchestration of one evaluation cycle:
- low confidence skips the oracle and yields the SAFE skip report
- escalated contexts consult the oracle once and use its report
- oracle failures fall back to the communication report without tones
- a timed-out oracle call is never overlapped by a later cycle
- the log entry is written before the alert is dispatched
- the resulting event is published to the bus when provided

No threads, UI, audio devices or network I/O are involved.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from safetyhalo.core.alert.dispatcher import AlertDispatcher
from safetyhalo.core.alert.patterns import AlertPattern, pattern_for
from safetyhalo.core.context.assembler import ContextAssembler
from safetyhalo.core.gate.fallback import COMMUNICATION_FALLBACK_REPORT
from safetyhalo.core.state_store import StateStore
from safetyhalo.domain.events import EvaluationEvent, PipelinePhase
from safetyhalo.domain.models import ClassifierState, RoomContext, SafetyReport, SafetyStatus
from safetyhalo.oracle.base import OracleTransportError
from safetyhalo.oracle.response import parse_report
from safetyhalo.services.controller import EvaluationController
from safetyhalo.simulation.scenarios import INITIAL_SENSORS

NOW = datetime(2026, 1, 1, 10, 0, 0)


@dataclass
class FakeOracle:
    """
    Oracle test double that records contexts and returns a preset report.
    """

    report: Optional[SafetyReport] = None
    error: Optional[Exception] = None
    seen: List[RoomContext] = field(default_factory=list)

    def evaluate(self, context: RoomContext) -> SafetyReport:
        self.seen.append(context)
        if self.error is not None:
            raise self.error
        assert self.report is not None
        return self.report


@dataclass
class RecordingSink:
    """
    Tone sink that records patterns and the log size at play time.
    """

    store: Optional[StateStore] = None
    played: List[AlertPattern] = field(default_factory=list)
    log_sizes: List[int] = field(default_factory=list)

    def play(self, pattern: AlertPattern) -> None:
        self.played.append(pattern)
        if self.store is not None:
            self.log_sizes.append(len(self.store.log_entries))


@dataclass
class FakeBus:
    """
    Fake event bus that records published evaluation events.
    """

    published: List[EvaluationEvent] = field(default_factory=list)

    def publish_evaluation(self, ev: EvaluationEvent) -> None:
        self.published.append(ev)


def _mk_controller(oracle: FakeOracle, bus: Optional[FakeBus] = None):
    store = StateStore()
    sink = RecordingSink(store=store)
    controller = EvaluationController(
        store=store,
        assembler=ContextAssembler(room_id="R1"),
        oracle=oracle,
        dispatcher=AlertDispatcher(alerts_enabled=store.alerts_enabled, sink=sink),
        bus=bus,
    )
    return controller, store, sink


def test_low_confidence_skips_oracle() -> None:
    """
    Confidence 0.60 against threshold 0.75 must not consult the oracle.
    """
    oracle = FakeOracle(report=SafetyReport(SafetyStatus.DANGER, "should not be used"))
    controller, store, sink = _mk_controller(oracle)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.FALL_LIKELY, 0.60, now=NOW)

    assert oracle.seen == []
    assert ev.escalated is False
    assert ev.report.status is SafetyStatus.SAFE
    assert "60%" in ev.report.summary and "75%" in ev.report.summary
    assert PipelinePhase.SKIPPED in ev.phases
    assert PipelinePhase.ANALYZING not in ev.phases
    assert sink.played == []

    head = store.log_entries[0]
    assert head.status is SafetyStatus.SAFE
    assert head.ml_state is ClassifierState.FALL_LIKELY


def test_escalated_danger_logs_then_alerts() -> None:
    """
    A DANGER report is logged at the head and then triggers the DANGER pattern.
    """
    oracle = FakeOracle(report=SafetyReport(SafetyStatus.DANGER, "Possible fall.", ("Call help.",), ("Go now.",)))
    controller, store, sink = _mk_controller(oracle)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.FALL_LIKELY, 0.90, notes="n", now=NOW)

    assert len(oracle.seen) == 1
    assert oracle.seen[0].ml_confidence == 0.90
    assert ev.report.status is SafetyStatus.DANGER
    assert sink.played == [pattern_for(SafetyStatus.DANGER)]
    # log entry already present when the alert fired
    assert sink.log_sizes == [1]

    head = store.log_entries[0]
    assert head.timestamp == "2026-01-01 10:00:00"
    assert head.status is SafetyStatus.DANGER
    assert head.sensor_summary == "T:22.8 G:8"

    assert ev.phases == (
        PipelinePhase.ASSEMBLING,
        PipelinePhase.GATING,
        PipelinePhase.ANALYZING,
        PipelinePhase.REPORT_READY,
        PipelinePhase.LOGGING,
        PipelinePhase.ALERTING,
        PipelinePhase.IDLE,
    )


def test_threshold_equal_to_confidence_escalates() -> None:
    oracle = FakeOracle(report=SafetyReport(SafetyStatus.WARNING, "w"))
    controller, _, sink = _mk_controller(oracle)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.LOUD_NOISE, 0.75, now=NOW)

    assert ev.escalated is True
    assert sink.played == [pattern_for(SafetyStatus.WARNING)]


def test_transport_error_falls_back_silently() -> None:
    """
    An unreachable oracle yields the SAFE communication fallback and no tones.
    """
    oracle = FakeOracle(error=OracleTransportError("connection refused"))
    controller, store, sink = _mk_controller(oracle)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.GAS_SMOKE_ALERT, 0.95, now=NOW)

    assert ev.oracle_failed is True
    assert ev.report == COMMUNICATION_FALLBACK_REPORT
    assert sink.played == []
    assert store.log_entries[0].status is SafetyStatus.SAFE


@dataclass
class SlowOracle:
    """
    Oracle that outlives the call timeout and tracks concurrent calls.
    """

    delay_s: float = 0.5
    calls: int = 0
    active: int = 0
    max_active: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def evaluate(self, context: RoomContext) -> SafetyReport:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        threading.Event().wait(self.delay_s)
        with self._lock:
            self.active -= 1
        return SafetyReport(SafetyStatus.DANGER, "late")


def test_timed_out_oracle_call_is_not_overlapped() -> None:
    """
    Cycles after a timeout fall back instead of starting a second call.
    """
    oracle = SlowOracle()
    store = StateStore()
    controller = EvaluationController(
        store=store,
        assembler=ContextAssembler(room_id="R1"),
        oracle=oracle,
        dispatcher=AlertDispatcher(alerts_enabled=store.alerts_enabled, sink=RecordingSink()),
        oracle_timeout_s=0.1,
    )
    try:
        events = [
            controller.evaluate(INITIAL_SENSORS, ClassifierState.LOUD_NOISE, 0.9, now=NOW) for _ in range(3)
        ]
    finally:
        controller.close()

    assert [ev.oracle_failed for ev in events] == [True, True, True]
    assert oracle.max_active == 1
    assert oracle.calls == 1
    assert len(store.log_entries) == 3


def test_missing_warden_actions_default() -> None:
    oracle = FakeOracle(report=parse_report({"status": "WARNING", "summary": "s", "actions_for_user": ["a"]}))
    controller, _, _ = _mk_controller(oracle)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.NO_MOVEMENT, 0.9, now=NOW)

    assert ev.report.actions_for_warden == ("None needed.",)


def test_threshold_change_applies_to_next_cycle() -> None:
    oracle = FakeOracle(report=SafetyReport(SafetyStatus.SAFE, "ok"))
    controller, store, _ = _mk_controller(oracle)

    controller.evaluate(INITIAL_SENSORS, ClassifierState.NORMAL, 0.7, now=NOW)
    store.set_threshold(0.5)
    controller.evaluate(INITIAL_SENSORS, ClassifierState.NORMAL, 0.7, now=NOW)

    assert len(oracle.seen) == 1


def test_alerts_disabled_still_logs() -> None:
    oracle = FakeOracle(report=SafetyReport(SafetyStatus.DANGER, "d"))
    controller, store, sink = _mk_controller(oracle)
    store.set_alerts_enabled(False)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.FALL_LIKELY, 0.9, now=NOW)

    assert sink.played == []
    assert ev.alert_handled is True
    assert store.log_entries[0].status is SafetyStatus.DANGER


def test_event_published_and_stored() -> None:
    bus = FakeBus()
    oracle = FakeOracle(report=SafetyReport(SafetyStatus.SAFE, "ok"))
    controller, store, _ = _mk_controller(oracle, bus=bus)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.NORMAL, 0.9, now=NOW)

    assert bus.published == [ev]
    assert store.latest_evaluation is ev
    assert ev.log_entry == store.log_entries[0]


def test_gas_danger_report_drives_alert_and_log_head() -> None:
    """
    Threshold 0.75, confidence 0.90, a DANGER answer for a gas event.
    """
    oracle = FakeOracle(
        report=parse_report(
            {
                "status": "DANGER",
                "summary": "Gas detected",
                "actions_for_user": ["Evacuate"],
                "actions_for_warden": ["Call fire dept"],
            }
        )
    )
    bus = FakeBus()
    controller, store, sink = _mk_controller(oracle, bus=bus)

    ev = controller.evaluate(INITIAL_SENSORS, ClassifierState.GAS_SMOKE_ALERT, 0.90, now=NOW)

    assert ev.report.summary == "Gas detected"
    assert ev.report.actions_for_user == ("Evacuate",)
    assert ev.report.actions_for_warden == ("Call fire dept",)
    assert sink.played == [pattern_for(SafetyStatus.DANGER)]
    assert store.log_entries[0] == ev.log_entry
    assert store.log_entries[0].status is SafetyStatus.DANGER
    assert store.log_entries[0].ml_state is ClassifierState.GAS_SMOKE_ALERT
