"""
Room context assembly.

Builds the immutable `RoomContext` submitted to each evaluation cycle from the
current sensor snapshot, the classifier output and static room metadata.

Validation policy
-----------------
Out-of-range input is **rejected**, never clamped: a confidence outside
[0, 1] (or NaN, or a non-number) and an unknown classifier state raise
:class:`ContextValidationError`. A rejected context never reaches the gate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from safetyhalo.domain.models import ClassifierState, RoomContext, SensorData


class ContextValidationError(ValueError):
    """Raised when a context cannot be assembled from the given inputs."""


def _coerce_state(state: Union[ClassifierState, str]) -> ClassifierState:
    if isinstance(state, ClassifierState):
        return state
    try:
        return ClassifierState(state)
    except ValueError:
        raise ContextValidationError(f"Unknown classifier state: {state!r}") from None


def _validate_confidence(confidence: float) -> float:
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ContextValidationError(f"Confidence must be a number, got {confidence!r}")
    if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
        raise ContextValidationError(f"Confidence must be within [0, 1], got {confidence!r}")
    return float(confidence)


@dataclass(frozen=True)
class ContextAssembler:
    """
    Factory for `RoomContext` records bound to one room.

    Parameters
    ----------
    room_id
        Identifier of the monitored room.
    expected_occupancy
        Static occupancy label attached to every context.
    """

    room_id: str
    expected_occupancy: str = "occupied"

    def assemble(
        self,
        sensors: SensorData,
        classifier_state: Union[ClassifierState, str],
        confidence: float,
        notes: str = "",
        now: Optional[datetime] = None,
    ) -> RoomContext:
        """
        Build a context for one evaluation cycle.

        Parameters
        ----------
        sensors
            Current sensor snapshot.
        classifier_state
            Classifier state (enum member or its string value).
        confidence
            Classifier confidence; must lie in [0, 1].
        notes
            Free-text notes.
        now
            Timestamp of the snapshot. If None, uses `datetime.now()`.

        Returns
        -------
        RoomContext
            The assembled, immutable context.

        Raises
        ------
        ContextValidationError
            If the confidence or the classifier state is invalid.
        """
        state = _coerce_state(classifier_state)
        conf = _validate_confidence(confidence)
        ts = now or datetime.now()

        return RoomContext(
            room_id=self.room_id,
            time=ts.isoformat(),
            ml_state=state,
            ml_confidence=conf,
            sensors=sensors,
            expected_occupancy=self.expected_occupancy,
            notes=notes,
        )
