"""
Unit tests for safetyhalo.oracle.boundary.

These tests validate that every oracle failure is captured at the boundary:
- exceptions of any type become OracleFailure
- wrong return types become OracleFailure
- a call exceeding the timeout becomes OracleFailure
- a timed-out call is never overlapped by the next one
- failures resolve to the communication fallback report
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime

from safetyhalo.core.context.assembler import ContextAssembler
from safetyhalo.core.gate.fallback import COMMUNICATION_FALLBACK_REPORT
from safetyhalo.domain.models import ClassifierState, RoomContext, SafetyReport, SafetyStatus
from safetyhalo.oracle.base import OracleError, OracleTransportError
from safetyhalo.oracle.boundary import (
    OracleFailure,
    OracleSuccess,
    TimedOracleCaller,
    request_report,
    resolve_report,
)
from safetyhalo.simulation.scenarios import INITIAL_SENSORS


def _ctx() -> RoomContext:
    return ContextAssembler(room_id="R1").assemble(
        INITIAL_SENSORS, ClassifierState.NORMAL, 0.9, now=datetime(2026, 1, 1)
    )


@dataclass
class FakeOracle:
    """Oracle returning a fixed value or raising a fixed error."""

    result: object = None
    error: Exception | None = None
    calls: int = 0

    def evaluate(self, context: RoomContext) -> SafetyReport:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result  # type: ignore[return-value]


@dataclass
class BlockingOracle:
    """Oracle that blocks until released."""

    release: threading.Event = field(default_factory=threading.Event)

    def evaluate(self, context: RoomContext) -> SafetyReport:
        self.release.wait(timeout=5.0)
        return SafetyReport(status=SafetyStatus.DANGER, summary="late")


def test_success_is_wrapped() -> None:
    report = SafetyReport(status=SafetyStatus.WARNING, summary="s")
    result = request_report(FakeOracle(result=report), _ctx())
    assert result == OracleSuccess(report)
    assert resolve_report(result) is report


def test_any_exception_becomes_failure() -> None:
    err = RuntimeError("boom")
    result = request_report(FakeOracle(error=err), _ctx())
    assert isinstance(result, OracleFailure)
    assert result.error is err


def test_wrong_return_type_becomes_failure() -> None:
    result = request_report(FakeOracle(result={"status": "SAFE"}), _ctx())
    assert isinstance(result, OracleFailure)


def test_timeout_becomes_failure() -> None:
    oracle = BlockingOracle()
    caller = TimedOracleCaller(0.05)
    try:
        result = request_report(oracle, _ctx(), caller=caller)
    finally:
        oracle.release.set()
        caller.shutdown()
    assert isinstance(result, OracleFailure)


def test_answer_within_timeout_is_success() -> None:
    report = SafetyReport(status=SafetyStatus.SAFE, summary="ok")
    caller = TimedOracleCaller(2.0)
    try:
        result = request_report(FakeOracle(result=report), _ctx(), caller=caller)
    finally:
        caller.shutdown()
    assert result == OracleSuccess(report)


def test_failure_resolves_to_fallback() -> None:
    oracle = FakeOracle(error=OracleTransportError("down"))
    assert resolve_report(request_report(oracle, _ctx())) is COMMUNICATION_FALLBACK_REPORT
    assert oracle.calls == 1


@dataclass
class CountingBlockingOracle:
    """Blocking oracle that tracks how many calls run at once."""

    release: threading.Event = field(default_factory=threading.Event)
    calls: int = 0
    active: int = 0
    max_active: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def evaluate(self, context: RoomContext) -> SafetyReport:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.release.wait(timeout=5.0)
        with self._lock:
            self.active -= 1
        return SafetyReport(status=SafetyStatus.WARNING, summary="done")


def test_timed_out_call_blocks_next_call_from_starting() -> None:
    oracle = CountingBlockingOracle()
    caller = TimedOracleCaller(0.05)
    try:
        first = request_report(oracle, _ctx(), caller=caller)
        second = request_report(oracle, _ctx(), caller=caller)
    finally:
        oracle.release.set()
        caller.shutdown()

    assert isinstance(first, OracleFailure)
    assert isinstance(second, OracleFailure)
    assert isinstance(second.error, OracleError)
    assert oracle.calls == 1
    assert oracle.max_active == 1


def test_next_call_runs_once_abandoned_call_finishes() -> None:
    oracle = CountingBlockingOracle()
    caller = TimedOracleCaller(1.0)
    try:
        caller.timeout_s = 0.05
        first = request_report(oracle, _ctx(), caller=caller)
        oracle.release.set()
        caller.timeout_s = 1.0
        second = request_report(oracle, _ctx(), caller=caller)
    finally:
        oracle.release.set()
        caller.shutdown()

    assert isinstance(first, OracleFailure)
    assert isinstance(second, OracleSuccess)
    assert oracle.calls == 2
    assert oracle.max_active == 1
