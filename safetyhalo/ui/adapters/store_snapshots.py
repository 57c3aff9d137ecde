from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from safetyhalo.core.state_store import StateStore
from safetyhalo.domain.events import EvaluationEvent
from safetyhalo.domain.models import SafetyStatus, TrendPoint

LogRow = Tuple[str, str, str, str]  # time, ml state, status, sensors


@dataclass(frozen=True)
class TrendSeries:
    labels: List[str]
    temp: List[float]
    gas: List[float]
    noise: List[float]


def status_level(status: SafetyStatus) -> Tuple[str, str]:
    """
    Map a status to the indicator level and its headline:
    OK / WARNING / CRITICAL
    """
    if status is SafetyStatus.DANGER:
        return "CRITICAL", "CRITICAL THREAT"
    elif status is SafetyStatus.WARNING:
        return "WARNING", "ANOMALY DETECTED"
    elif status is SafetyStatus.SAFE:
        return "OK", "NOMINAL STATUS"
    raise ValueError(f"Unhandled safety status: {status!r}")


def indicator_state(event: Optional[EvaluationEvent]) -> Tuple[str, str]:
    """
    Indicator level and text for the latest evaluation (OK when none yet).
    """
    if event is None:
        return "OK", "NOMINAL STATUS - awaiting first evaluation"
    level, headline = status_level(event.report.status)
    return level, f"{headline} - model assurance {event.context.ml_confidence * 100:.0f}%"


def log_rows(store: StateStore, limit: int = 100) -> List[LogRow]:
    rows: List[LogRow] = []
    for e in store.log_entries[:limit]:
        rows.append((e.timestamp, e.ml_state.value, e.status.value, e.sensor_summary))
    return rows


def trend_series(points: List[TrendPoint]) -> TrendSeries:
    return TrendSeries(
        labels=[p.time for p in points],
        temp=[p.temp for p in points],
        gas=[p.gas for p in points],
        noise=[p.noise for p in points],
    )


def report_text(event: Optional[EvaluationEvent]) -> str:
    """
    Plain-text rendering of the latest report for the report panel.
    """
    if event is None:
        return "Initialize a scenario to begin AI context evaluation."

    r = event.report
    lines = [f'AI ASSESSMENT: "{r.summary}"', "", "Resident directives:"]
    lines.extend(f"  - {a}" for a in r.actions_for_user)
    lines.append("")
    lines.append("Warden directives:")
    lines.extend(f"  - {a}" for a in r.actions_for_warden)
    if not event.escalated:
        lines.append("")
        lines.append("(AI analysis skipped by the confidence gate)")
    elif event.oracle_failed:
        lines.append("")
        lines.append("(AI unreachable, local fallback used)")
    return "\n".join(lines)
