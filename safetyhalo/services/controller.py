from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

from safetyhalo.core.alert.dispatcher import AlertDispatcher
from safetyhalo.core.context.assembler import ContextAssembler
from safetyhalo.core.gate.confidence_gate import ConfidenceGate
from safetyhalo.core.state_store import StateStore
from safetyhalo.domain.events import EvaluationEvent, PipelinePhase
from safetyhalo.domain.models import ClassifierState, LogEntry, RoomContext, SensorData
from safetyhalo.oracle.base import SafetyOracle
from safetyhalo.oracle.boundary import OracleFailure, TimedOracleCaller, request_report, resolve_report
from safetyhalo.runtime.event_bus import EventBus

log = logging.getLogger(__name__)

LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class EvaluationController:
    """
    Orchestrate one evaluation cycle.

    Responsibilities
    ----------------
    - Gate the context on the classifier confidence (threshold read now).
    - Consult the oracle once when escalated, through the oracle boundary.
    - Record the outcome in the event log (persisted by the store).
    - Hand the status to the alert dispatcher (non-blocking).
    - Publish the resulting `EvaluationEvent` to the `EventBus` when present.

    Notes
    -----
    This controller contains orchestration logic only. Gate policy lives in
    `ConfidenceGate`, failure conversion in `oracle.boundary`, and tone
    mapping in the alert patterns. The controller itself is not re-entrant
    for the same room; `EvaluationWorkerThread` serializes cycles.

    Parameters
    ----------
    store
        Thread-safe application state owner.
    assembler
        Context factory bound to the monitored room.
    oracle
        External reasoning oracle.
    dispatcher
        Alert dispatcher.
    bus
        Optional event bus for UI consumers. If None, publishing is skipped.
    oracle_timeout_s
        Optional wall-clock limit for the oracle call. Timed calls share one
        `TimedOracleCaller`, so an abandoned call is never overlapped.
    """

    store: StateStore
    assembler: ContextAssembler
    oracle: SafetyOracle
    dispatcher: AlertDispatcher
    bus: Optional[EventBus] = None
    oracle_timeout_s: Optional[float] = None
    _caller: Optional[TimedOracleCaller] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        if self.oracle_timeout_s is not None:
            self._caller = TimedOracleCaller(self.oracle_timeout_s)

    def close(self) -> None:
        """
        Release the timed-call worker. Running calls are not waited for.
        """
        if self._caller is not None:
            self._caller.shutdown()

    def evaluate(
        self,
        sensors: SensorData,
        classifier_state: Union[ClassifierState, str],
        confidence: float,
        notes: str = "",
        now: Optional[datetime] = None,
    ) -> EvaluationEvent:
        """
        Assemble a context from raw inputs and run one cycle on it.

        Raises
        ------
        ContextValidationError
            If the inputs are invalid; no cycle is run.
        """
        context = self.assembler.assemble(sensors, classifier_state, confidence, notes, now=now)
        return self.run_cycle(context, now=now)

    def run_cycle(self, context: RoomContext, now: Optional[datetime] = None) -> EvaluationEvent:
        """
        Run gate, oracle (or fallback), logging and alerting for a context.

        Parameters
        ----------
        context
            Assembled context.
        now
            Timestamp for the log entry. If None, uses `datetime.now()`.

        Returns
        -------
        EvaluationEvent
            What happened during the cycle.
        """
        ts = now or datetime.now()
        phases: List[PipelinePhase] = [PipelinePhase.ASSEMBLING, PipelinePhase.GATING]

        gate = ConfidenceGate(self.store.threshold)
        decision = gate.check(context)

        oracle_failed = False
        if decision.escalate:
            phases.append(PipelinePhase.ANALYZING)
            result = request_report(self.oracle, context, caller=self._caller)
            oracle_failed = isinstance(result, OracleFailure)
            report = resolve_report(result)
        else:
            phases.append(PipelinePhase.SKIPPED)
            log.info(
                "Confidence %.2f below threshold %.2f, oracle skipped",
                context.ml_confidence,
                decision.threshold,
            )
            report = gate.skip_report(context, decision)
        phases.append(PipelinePhase.REPORT_READY)

        entry = LogEntry(
            timestamp=ts.strftime(LOG_TIMESTAMP_FORMAT),
            status=report.status,
            ml_state=context.ml_state,
            sensor_summary=context.sensors.summary(),
        )
        phases.append(PipelinePhase.LOGGING)
        self.store.append_log(entry)

        phases.append(PipelinePhase.ALERTING)
        alert_handled = self.dispatcher.dispatch(report.status)

        phases.append(PipelinePhase.IDLE)
        event = EvaluationEvent(
            context=context,
            report=report,
            escalated=decision.escalate,
            oracle_failed=oracle_failed,
            alert_handled=alert_handled,
            log_entry=entry,
            phases=tuple(phases),
        )
        self.store.set_latest_evaluation(event)

        log.info(
            "Cycle done: room=%s state=%s confidence=%.2f status=%s escalated=%s oracle_failed=%s",
            context.room_id,
            context.ml_state.value,
            context.ml_confidence,
            report.status.value,
            decision.escalate,
            oracle_failed,
        )

        if self.bus is not None:
            self.bus.publish_evaluation(event)

        return event
