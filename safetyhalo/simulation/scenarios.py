"""
Demo scenarios for the dashboard.

Each scenario pairs a classifier state with a sensor snapshot derived from
the baseline room, the way the edge device would report it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Dict, Optional

from safetyhalo.domain.models import ClassifierState, SensorData

INITIAL_SENSORS = SensorData(
    motion_events_last_15min=12,
    avg_temperature_c=22.8,
    avg_humidity=48,
    gas_level=0.08,
    smoke_level=0.02,
    noise_level=0.15,
    door_open=False,
)

SIMULATED_CONFIDENCE_MIN = 0.85
SIMULATED_CONFIDENCE_MAX = 0.99


@dataclass(frozen=True)
class Scenario:
    name: str
    ml_state: ClassifierState
    sensors: SensorData
    notes: str


SCENARIOS: Dict[str, Scenario] = {
    s.name: s
    for s in (
        Scenario(
            name="NORMAL",
            ml_state=ClassifierState.NORMAL,
            sensors=INITIAL_SENSORS,
            notes="Baseline resident activity.",
        ),
        Scenario(
            name="FALL_INCIDENT",
            ml_state=ClassifierState.FALL_LIKELY,
            sensors=replace(INITIAL_SENSORS, motion_events_last_15min=145, noise_level=0.88),
            notes="Sharp acoustic peak followed by sustained immobility.",
        ),
        Scenario(
            name="GAS_DETECTED",
            ml_state=ClassifierState.GAS_SMOKE_ALERT,
            sensors=replace(INITIAL_SENSORS, gas_level=0.92, smoke_level=0.15),
            notes="Concentrated gas reading detected in kitchenette.",
        ),
        Scenario(
            name="THERMAL_ALERT",
            ml_state=ClassifierState.OVERHEAT_RISK,
            sensors=replace(INITIAL_SENSORS, avg_temperature_c=48.5, smoke_level=0.4),
            notes="Rapid localized temperature delta identified.",
        ),
        Scenario(
            name="NIGHT_INACTIVE",
            ml_state=ClassifierState.NO_MOVEMENT,
            sensors=replace(INITIAL_SENSORS, motion_events_last_15min=0),
            notes="Zero activity detected during expected active hours.",
        ),
        Scenario(
            name="DISTURBANCE",
            ml_state=ClassifierState.LOUD_NOISE,
            sensors=replace(INITIAL_SENSORS, noise_level=0.98),
            notes="Unusual high-frequency noise detected.",
        ),
    )
}


def get_scenario(name: str) -> Scenario:
    """
    Look up a scenario by name.

    Raises
    ------
    KeyError
        If the scenario does not exist.
    """
    try:
        return SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario: {name!r}") from None


def simulated_confidence(rng: Optional[random.Random] = None) -> float:
    """
    Draw a classifier confidence the way the demo edge device reports one.
    """
    r = rng or random
    return r.uniform(SIMULATED_CONFIDENCE_MIN, SIMULATED_CONFIDENCE_MAX)
