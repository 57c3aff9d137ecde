"""
Domain models and enums.

This module defines the core domain-level types used across the system:
- Safety statuses and local classifier states
- Sensor snapshots and the room context submitted for evaluation
- Safety reports (from the oracle or the local fallback)
- Event log entries, trend points and persisted user settings

These are designed as immutable (frozen) dataclasses so they can be shared
across the pipeline worker, the trend sampler and the UI thread safely.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple


class SafetyStatus(str, Enum):
    """
    Outcome of one evaluation cycle.

    Members
    -------
    SAFE : str
        Nothing requires attention.
    WARNING : str
        Abnormal situation; the resident should check.
    DANGER : str
        Immediate intervention required.
    """

    SAFE = "SAFE"
    WARNING = "WARNING"
    DANGER = "DANGER"


class ClassifierState(str, Enum):
    """
    State reported by the on-device classifier.

    Members
    -------
    NORMAL : str
        Regular resident activity.
    NO_MOVEMENT : str
        No activity during expected active hours.
    FALL_LIKELY : str
        Acoustic peak followed by immobility.
    GAS_SMOKE_ALERT : str
        Gas or smoke concentration above baseline.
    OVERHEAT_RISK : str
        Rapid temperature rise.
    LOUD_NOISE : str
        Unusual high-level noise.
    """

    NORMAL = "NORMAL"
    NO_MOVEMENT = "NO_MOVEMENT"
    FALL_LIKELY = "FALL_LIKELY"
    GAS_SMOKE_ALERT = "GAS_SMOKE_ALERT"
    OVERHEAT_RISK = "OVERHEAT_RISK"
    LOUD_NOISE = "LOUD_NOISE"


@dataclass(frozen=True)
class SensorData:
    """
    Snapshot of the room sensors as produced by the edge sensing layer.

    Parameters
    ----------
    motion_events_last_15min
        Number of motion events over the last 15 minutes.
    avg_temperature_c
        Average temperature in degrees Celsius.
    avg_humidity
        Average relative humidity (0-100).
    gas_level
        Normalized gas concentration (0-1).
    smoke_level
        Normalized smoke concentration (0-1).
    noise_level
        Normalized noise level (0-1).
    door_open
        Whether the room door is open.
    """

    motion_events_last_15min: int
    avg_temperature_c: float
    avg_humidity: float
    gas_level: float
    smoke_level: float
    noise_level: float
    door_open: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "motion_events_last_15min": self.motion_events_last_15min,
            "avg_temperature_c": self.avg_temperature_c,
            "avg_humidity": self.avg_humidity,
            "gas_level": self.gas_level,
            "smoke_level": self.smoke_level,
            "noise_level": self.noise_level,
            "door_open": self.door_open,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SensorData":
        return cls(
            motion_events_last_15min=int(data["motion_events_last_15min"]),
            avg_temperature_c=float(data["avg_temperature_c"]),
            avg_humidity=float(data["avg_humidity"]),
            gas_level=float(data["gas_level"]),
            smoke_level=float(data["smoke_level"]),
            noise_level=float(data["noise_level"]),
            door_open=bool(data.get("door_open", False)),
        )

    def summary(self) -> str:
        """
        Compact one-line summary used in the event log.

        Returns
        -------
        str
            ``"T:<temperature> G:<gas percent>"``, e.g. ``"T:22.8 G:8"``.
        """
        return f"T:{self.avg_temperature_c:.1f} G:{self.gas_level * 100:.0f}"


@dataclass(frozen=True)
class RoomContext:
    """
    One timestamped snapshot of sensor and classifier state.

    Created once per evaluation cycle by the context assembler and never
    mutated afterwards.

    Parameters
    ----------
    room_id
        Identifier of the monitored room.
    time
        ISO-8601 timestamp of the snapshot.
    ml_state
        Classifier state.
    ml_confidence
        Classifier confidence in [0, 1].
    sensors
        Embedded sensor snapshot.
    expected_occupancy
        Free-form occupancy label (e.g. "occupied").
    notes
        Free-text notes attached by the trigger.
    """

    room_id: str
    time: str
    ml_state: ClassifierState
    ml_confidence: float
    sensors: SensorData
    expected_occupancy: str
    notes: str

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the context into the oracle request shape.
        """
        return {
            "room_id": self.room_id,
            "time": self.time,
            "ml_state": self.ml_state.value,
            "ml_confidence": self.ml_confidence,
            "sensors": self.sensors.to_dict(),
            "expected_occupancy": self.expected_occupancy,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class SafetyReport:
    """
    Structured safety assessment for one context.

    Parameters
    ----------
    status
        Overall classification.
    summary
        Short human-readable explanation.
    actions_for_user
        Ordered actions for the resident.
    actions_for_warden
        Ordered actions for the warden/owner.
    """

    status: SafetyStatus
    summary: str
    actions_for_user: Tuple[str, ...] = ()
    actions_for_warden: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LogEntry:
    """
    One completed evaluation cycle as stored in the event log.

    Parameters
    ----------
    timestamp
        Wall-clock time of the cycle (display string).
    status
        Resulting safety status.
    ml_state
        Classifier state of the evaluated context.
    sensor_summary
        Compact sensor summary (see :meth:`SensorData.summary`).
    """

    timestamp: str
    status: SafetyStatus
    ml_state: ClassifierState
    sensor_summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "status": self.status.value,
            "ml_state": self.ml_state.value,
            "sensor_summary": self.sensor_summary,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LogEntry":
        """
        Rebuild an entry from its stored form.

        Raises
        ------
        KeyError
            If a field is missing.
        ValueError
            If status or state is not a known member.
        """
        return cls(
            timestamp=str(data["timestamp"]),
            status=SafetyStatus(data["status"]),
            ml_state=ClassifierState(data["ml_state"]),
            sensor_summary=str(data["sensor_summary"]),
        )


@dataclass(frozen=True)
class TrendPoint:
    """
    One point of the live trend chart.

    Parameters
    ----------
    time
        Wall-clock label (``HH:MM:SS``).
    temp
        Temperature in degrees Celsius.
    gas
        Gas level in percent.
    noise
        Noise level in percent.
    """

    time: str
    temp: float
    gas: float
    noise: float


DEFAULT_ALERTS_ENABLED = True
DEFAULT_CONFIDENCE_THRESHOLD = 0.75


@dataclass(frozen=True)
class Settings:
    """
    Process-wide user settings, persisted on every change.

    Parameters
    ----------
    alerts_enabled
        Whether audible alerts are played.
    confidence_threshold
        Minimum classifier confidence required to consult the oracle.
    """

    alerts_enabled: bool = DEFAULT_ALERTS_ENABLED
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alertsEnabled": self.alerts_enabled,
            "confidenceThreshold": self.confidence_threshold,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        """
        Rebuild settings from storage, falling back to defaults per field.

        Unknown keys are ignored; a value of the wrong type or a threshold
        outside [0, 1] is replaced by its default.
        """
        if not isinstance(data, Mapping):
            return cls()

        alerts = data.get("alertsEnabled")
        if not isinstance(alerts, bool):
            alerts = DEFAULT_ALERTS_ENABLED

        threshold = data.get("confidenceThreshold")
        if (
            isinstance(threshold, bool)
            or not isinstance(threshold, (int, float))
            or math.isnan(threshold)
            or not 0.0 <= threshold <= 1.0
        ):
            threshold = DEFAULT_CONFIDENCE_THRESHOLD

        return cls(alerts_enabled=alerts, confidence_threshold=float(threshold))
