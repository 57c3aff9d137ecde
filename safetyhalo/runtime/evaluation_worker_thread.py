from __future__ import annotations

import logging
import threading
from queue import Empty, Full, Queue

from safetyhalo.domain.models import RoomContext
from safetyhalo.services.controller import EvaluationController

log = logging.getLogger(__name__)


class EvaluationWorkerThread:
    """
    Worker thread running evaluation cycles one at a time.

    Responsibilities
    ----------------
    - Consume assembled contexts from a bounded queue.
    - Delegate each one to `EvaluationController.run_cycle(...)`.

    Concurrency Model
    -----------------
    - A single consumer: at most one oracle call is in flight, and triggers
      arriving meanwhile queue behind it in FIFO order. Log entries are
      therefore appended in trigger order.
    - `submit` never blocks the caller; if the queue is full the new trigger
      is dropped and False is returned.
    - `stop` discards queued contexts so `wait_idle` cannot block forever.
    - The thread polls with a timeout to remain responsive to stop signals.
    - Exceptions in a cycle are caught and logged so the thread survives.

    Parameters
    ----------
    controller
        Controller running one cycle per context.
    stop_event
        Thread stop signal. When set, the worker exits its loop.
    max_pending
        Capacity of the pending-trigger queue.
    """

    def __init__(
        self,
        controller: EvaluationController,
        stop_event: threading.Event,
        max_pending: int = 32,
    ):
        self._controller = controller
        self._stop = stop_event
        self._q: "Queue[RoomContext]" = Queue(maxsize=max_pending)
        self._outstanding = 0
        self._outstanding_lock = threading.Lock()
        self._idle = threading.Event()
        self._idle.set()
        self._thread = threading.Thread(target=self._run, name="evaluation-worker", daemon=True)

    def start(self) -> None:
        """
        Start the worker thread if it is not already running.
        """
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        """
        Signal the worker thread to stop and discard contexts still queued.

        A cycle already running finishes; `wait_idle` returns once it has.
        """
        self._stop.set()
        with self._outstanding_lock:
            dropped = 0
            while True:
                try:
                    self._q.get_nowait()
                except Empty:
                    break
                dropped += 1
            self._outstanding -= dropped
            if self._outstanding == 0:
                self._idle.set()
        if dropped:
            log.info("Discarded %d queued evaluation(s) on stop", dropped)

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def submit(self, context: RoomContext) -> bool:
        """
        Queue a context for evaluation.

        Returns
        -------
        bool
            True if queued, False if dropped because the queue is full or the
            worker is stopping.
        """
        with self._outstanding_lock:
            if self._stop.is_set():
                return False
            try:
                self._q.put_nowait(context)
            except Full:
                log.warning("Evaluation queue full, dropping trigger for %s", context.ml_state.value)
                return False
            self._outstanding += 1
            self._idle.clear()
        return True

    @property
    def busy(self) -> bool:
        return not self._idle.is_set()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """
        Block until every submitted context has been processed.

        Returns
        -------
        bool
            True if idle, False on timeout.
        """
        return self._idle.wait(timeout=timeout)

    def _run(self) -> None:
        """
        Worker loop that consumes contexts and runs one cycle each.
        """
        while not self._stop.is_set():
            try:
                context = self._q.get(timeout=0.5)
            except Empty:
                continue

            try:
                self._controller.run_cycle(context)
            except Exception:
                log.exception("Evaluation cycle failed for %s", context.ml_state.value)
            finally:
                with self._outstanding_lock:
                    self._outstanding -= 1
                    if self._outstanding == 0:
                        self._idle.set()
