"""
Evaluation cycle domain events.

This module defines the event-level representation of one evaluation cycle.
An `EvaluationEvent` represents *what happened* during a cycle, while the
`StateStore` holds *what is currently true* (latest report, log, settings).

Events are typically used for:
- UI refresh (status indicator, report panel)
- audit trails in tests
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from safetyhalo.domain.models import LogEntry, RoomContext, SafetyReport


class PipelinePhase(str, Enum):
    """
    States walked by the pipeline during one evaluation cycle.

    ``ASSEMBLING -> GATING -> {SKIPPED | ANALYZING} -> REPORT_READY ->
    LOGGING -> ALERTING -> IDLE``
    """

    ASSEMBLING = "ASSEMBLING"
    GATING = "GATING"
    SKIPPED = "SKIPPED"
    ANALYZING = "ANALYZING"
    REPORT_READY = "REPORT_READY"
    ALERTING = "ALERTING"
    LOGGING = "LOGGING"
    IDLE = "IDLE"


@dataclass(frozen=True)
class EvaluationEvent:
    """
    Result of one completed evaluation cycle.

    Parameters
    ----------
    context
        The evaluated room context.
    report
        Final report (oracle, gate-skip or communication fallback).
    escalated
        Whether the confidence gate let the context through to the oracle.
    oracle_failed
        Whether the oracle was consulted and failed.
    alert_handled
        Whether the alert dispatcher handled the status.
    log_entry
        Entry appended to the event log.
    phases
        Pipeline phases walked, in order.
    """

    context: RoomContext
    report: SafetyReport
    escalated: bool
    oracle_failed: bool
    alert_handled: bool
    log_entry: LogEntry
    phases: Tuple[PipelinePhase, ...]
