"""
Oracle response validation.

Turns the oracle's JSON answer into a `SafetyReport`.

Policy
------
- Absent fields are filled with safe defaults; partial answers are successes.
  An empty `status` or `summary` string counts as absent.
- Present but malformed fields (unknown status, wrong types) and non-object
  payloads raise :class:`OracleResponseError`, which the boundary converts
  into the communication fallback.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

from safetyhalo.core.gate.fallback import NONE_NEEDED
from safetyhalo.domain.models import SafetyReport, SafetyStatus
from safetyhalo.oracle.base import OracleResponseError

DEFAULT_SUMMARY = "No analysis available."


def _parse_status(raw: Any) -> SafetyStatus:
    if raw is None or raw == "":
        return SafetyStatus.SAFE
    if not isinstance(raw, str):
        raise OracleResponseError(f"status must be a string, got {type(raw).__name__}")
    try:
        return SafetyStatus(raw)
    except ValueError:
        raise OracleResponseError(f"Unknown status: {raw!r}") from None


def _parse_summary(raw: Any) -> str:
    if raw is None or raw == "":
        return DEFAULT_SUMMARY
    if not isinstance(raw, str):
        raise OracleResponseError(f"summary must be a string, got {type(raw).__name__}")
    return raw


def _parse_actions(name: str, raw: Any) -> List[str]:
    if not isinstance(raw, list):
        raise OracleResponseError(f"{name} must be a list, got {type(raw).__name__}")
    out: List[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise OracleResponseError(f"{name} must contain only strings")
        out.append(item)
    return out


def _parse_warden_actions(raw: Any) -> Tuple[str, ...]:
    # Either a list, or the literal sentinel string when nothing is needed.
    if raw is None or raw == NONE_NEEDED:
        return (NONE_NEEDED,)
    actions = _parse_actions("actions_for_warden", raw)
    return tuple(actions) if actions else (NONE_NEEDED,)


def parse_report(payload: Any) -> SafetyReport:
    """
    Validate an oracle payload and build a report.

    Parameters
    ----------
    payload
        JSON-decoded oracle answer.

    Returns
    -------
    SafetyReport
        Report with defaults filled in for absent fields.

    Raises
    ------
    OracleResponseError
        If the payload is not an object or a present field is malformed.
    """
    if not isinstance(payload, dict):
        raise OracleResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    user_raw = payload.get("actions_for_user")
    user_actions = () if user_raw is None else tuple(_parse_actions("actions_for_user", user_raw))

    return SafetyReport(
        status=_parse_status(payload.get("status")),
        summary=_parse_summary(payload.get("summary")),
        actions_for_user=user_actions,
        actions_for_warden=_parse_warden_actions(payload.get("actions_for_warden")),
    )


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Return the first JSON object found in model output text.

    Markdown code fences and leading prose are tolerated.

    Parameters
    ----------
    text
        Raw text returned by the model.

    Returns
    -------
    dict
        Decoded JSON object.

    Raises
    ------
    OracleResponseError
        If no JSON object can be decoded.
    """
    if not isinstance(text, str) or not text.strip():
        raise OracleResponseError("Empty oracle response")

    dec = json.JSONDecoder()
    i = text.find("{")
    while i != -1:
        try:
            obj, _ = dec.raw_decode(text, i)
        except json.JSONDecodeError:
            i = text.find("{", i + 1)
            continue
        if isinstance(obj, dict):
            return obj
        i = text.find("{", i + 1)

    raise OracleResponseError("No JSON object found in oracle response")
