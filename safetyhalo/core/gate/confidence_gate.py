"""
Confidence gate.

Decides whether a context is trustworthy enough to consult the reasoning
oracle. The threshold is read through a provider at every decision so that a
settings change applies to the next cycle, never retroactively.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from safetyhalo.core.gate.fallback import gate_skip_report
from safetyhalo.domain.models import RoomContext, SafetyReport


def should_escalate(context: RoomContext, threshold: float) -> bool:
    """
    Return True iff the context confidence reaches the threshold.
    """
    return context.ml_confidence >= threshold


@dataclass(frozen=True)
class GateDecision:
    """
    Outcome of one gate check.

    Parameters
    ----------
    escalate
        Whether the oracle should be consulted.
    threshold
        Threshold read for this decision.
    """

    escalate: bool
    threshold: float


@dataclass(frozen=True)
class ConfidenceGate:
    """
    Gate bound to a live threshold source.

    Parameters
    ----------
    threshold_provider
        Callable returning the current threshold (e.g. `StateStore.threshold`).
    """

    threshold_provider: Callable[[], float]

    def check(self, context: RoomContext) -> GateDecision:
        threshold = self.threshold_provider()
        return GateDecision(escalate=should_escalate(context, threshold), threshold=threshold)

    def skip_report(self, context: RoomContext, decision: GateDecision) -> SafetyReport:
        """
        Report synthesized when the gate blocks the context.
        """
        return gate_skip_report(context.ml_confidence, decision.threshold)
