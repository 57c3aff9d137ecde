from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Optional, Union

from safetyhalo.core.context.assembler import ContextAssembler
from safetyhalo.core.export.csv_export import export_log_csv
from safetyhalo.core.state_store import StateStore
from safetyhalo.domain.models import ClassifierState, RoomContext, SensorData
from safetyhalo.runtime.evaluation_worker_thread import EvaluationWorkerThread
from safetyhalo.runtime.trend_sampler_thread import DEFAULT_TREND_INTERVAL_S, TrendSamplerThread
from safetyhalo.services.controller import EvaluationController
from safetyhalo.simulation.scenarios import INITIAL_SENSORS, get_scenario, simulated_confidence

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppRuntimeConfig:
    """
    Runtime configuration for thread orchestration.

    Parameters
    ----------
    trend_interval_s
        Period of the trend sampler.
    max_pending_evaluations
        Capacity of the evaluation trigger queue.
    """

    trend_interval_s: float = DEFAULT_TREND_INTERVAL_S
    max_pending_evaluations: int = 32


class AppRuntime:
    """
    Thread supervisor and the command surface consumed by the dashboard.

    This class owns:
    - a shared stop event
    - thread lifecycles (start/stop/join)
    - the trigger interface (evaluate, settings changes, log actions)

    Thread Topology
    ---------------
    1) EvaluationWorkerThread (business logic)
       - consumes assembled contexts one at a time
       - invokes EvaluationController.run_cycle()
       - controller gates, consults the oracle, logs, alerts, publishes

    2) TrendSamplerThread (periodic)
       - every `trend_interval_s`, samples the latest sensor snapshot into
         the trend buffer, independently of evaluations

    Notes
    -----
    - Contexts are assembled on the caller's thread so invalid input is
      reported to the caller immediately and never reaches the gate.
    - Settings and log mutations go through the `StateStore`, which persists
      them under its lock.
    """

    def __init__(
        self,
        cfg: AppRuntimeConfig,
        controller: EvaluationController,
        store: StateStore,
        assembler: ContextAssembler,
        rng: Optional[random.Random] = None,
    ):
        self._cfg = cfg
        self._controller = controller
        self._store = store
        self._assembler = assembler
        self._rng = rng or random.Random()
        self._stop = threading.Event()

        self._evaluation_worker = EvaluationWorkerThread(
            controller=controller,
            stop_event=self._stop,
            max_pending=cfg.max_pending_evaluations,
        )
        self._trend_sampler = TrendSamplerThread(
            store=store,
            stop_event=self._stop,
            interval_s=cfg.trend_interval_s,
            rng=self._rng,
        )

    @property
    def store(self) -> StateStore:
        return self._store

    def start(self) -> None:
        """
        Start all runtime threads.

        Notes
        -----
        Seeds the baseline sensor snapshot first (boot context) so the trend
        chart has data before the first trigger.
        """
        if self._store.latest_sensors is None:
            self._store.update_sensors(INITIAL_SENSORS)
        self._evaluation_worker.start()
        self._trend_sampler.start()

    def stop(self) -> None:
        """
        Stop all runtime threads and wait briefly for shutdown.
        """
        self._evaluation_worker.stop()
        self._trend_sampler.stop()

        self._evaluation_worker.join(timeout=2.0)
        self._trend_sampler.join(timeout=2.0)
        self._controller.close()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """
        Wait until all queued evaluations have completed.
        """
        return self._evaluation_worker.wait_idle(timeout=timeout)

    @property
    def busy(self) -> bool:
        """True while an evaluation is queued or running."""
        return self._evaluation_worker.busy

    # --- Trigger interface ---
    def trigger_evaluation(
        self,
        sensors: SensorData,
        classifier_state: Union[ClassifierState, str],
        notes: str = "",
        confidence: Optional[float] = None,
    ) -> RoomContext:
        """
        Assemble a context and queue it for evaluation.

        Parameters
        ----------
        sensors
            Sensor snapshot; also becomes the latest snapshot for the trend.
        classifier_state
            Classifier state.
        notes
            Free-text notes.
        confidence
            Classifier confidence. If None, a simulated confidence is drawn.

        Returns
        -------
        RoomContext
            The queued context.

        Raises
        ------
        ContextValidationError
            If the inputs are invalid; nothing is queued.
        """
        conf = simulated_confidence(self._rng) if confidence is None else confidence
        context = self._assembler.assemble(sensors, classifier_state, conf, notes)
        self._store.update_sensors(context.sensors)
        self._evaluation_worker.submit(context)
        return context

    def trigger_scenario(self, name: str, confidence: Optional[float] = None) -> RoomContext:
        """
        Trigger one of the predefined demo scenarios by name.
        """
        s = get_scenario(name)
        return self.trigger_evaluation(s.sensors, s.ml_state, s.notes, confidence=confidence)

    def set_threshold(self, value: float) -> None:
        self._store.set_threshold(value)
        log.info("Confidence threshold set to %.2f", value)

    def set_alerts_enabled(self, enabled: bool) -> None:
        self._store.set_alerts_enabled(enabled)
        log.info("Alerts %s", "enabled" if enabled else "disabled")

    def clear_log(self) -> None:
        self._store.clear_log()
        log.info("Event log cleared")

    def export_log(self) -> str:
        return export_log_csv(self._store.log_entries)
