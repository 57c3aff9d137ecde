from __future__ import annotations

import logging
from dataclasses import dataclass, field
from queue import Full, Queue

from safetyhalo.domain.events import EvaluationEvent

log = logging.getLogger(__name__)


@dataclass
class EventBus:
    """
    In-process event bus for evaluation events using a thread-safe queue.

    The bus provides a simple producer/consumer mechanism:
    - Producers publish :class:`~safetyhalo.domain.events.EvaluationEvent`
      via :meth:`publish_evaluation`.
    - Consumers (e.g., the dashboard refresh timer) drain
      :attr:`evaluation_events_q`.

    Backpressure Policy
    -------------------
    If the queue is full, events are dropped (best-effort). The state store
    always holds the latest evaluation, so a dropped event loses nothing
    authoritative.

    Attributes
    ----------
    evaluation_events_q
        Bounded queue of evaluation events.
    """

    evaluation_events_q: "Queue[EvaluationEvent]" = field(default_factory=lambda: Queue(maxsize=1000))

    def publish_evaluation(self, ev: EvaluationEvent) -> None:
        """
        Publish an evaluation event to the queue (non-blocking).

        Parameters
        ----------
        ev
            EvaluationEvent to publish.
        """
        try:
            self.evaluation_events_q.put_nowait(ev)
        except Full:
            log.debug("Event bus full, dropping evaluation event")
