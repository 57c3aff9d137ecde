"""
Local fallback reports.

Deterministic, safe-by-default reports used whenever the oracle path cannot
be trusted: either the confidence gate skipped it, or the call failed.
"""

from __future__ import annotations

import math

from safetyhalo.domain.models import SafetyReport, SafetyStatus

NONE_NEEDED = "None needed."

COMMUNICATION_FALLBACK_REPORT = SafetyReport(
    status=SafetyStatus.SAFE,
    summary="Communication error with AI. Falling back to local heuristics.",
    actions_for_user=("Check sensors manually.",),
    actions_for_warden=(NONE_NEEDED,),
)

MANUAL_CHECK_ACTIONS = (
    "Check the room manually if something seems wrong.",
    "Verify the sensors are clean and connected.",
)


def _percent(value: float, rounding=math.floor) -> str:
    # round() first strips float noise such as 0.7 * 100 == 70.00000000000001.
    return f"{rounding(round(value * 100, 6)):d}%"


def gate_skip_report(confidence: float, threshold: float) -> SafetyReport:
    """
    Build the report used when the confidence gate blocks escalation.

    Parameters
    ----------
    confidence
        Measured classifier confidence.
    threshold
        Gate threshold in effect for this cycle.

    Returns
    -------
    SafetyReport
        SAFE report naming both values as whole percentages.
    """
    return SafetyReport(
        status=SafetyStatus.SAFE,
        summary=(
            f"Classifier confidence {_percent(confidence)} is below the "
            f"{_percent(threshold, math.ceil)} threshold. AI analysis was skipped."
        ),
        actions_for_user=MANUAL_CHECK_ACTIONS,
        actions_for_warden=(NONE_NEEDED,),
    )
