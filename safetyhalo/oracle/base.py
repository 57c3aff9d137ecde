from __future__ import annotations

from typing import Protocol

from safetyhalo.domain.models import RoomContext, SafetyReport


class OracleError(Exception):
    """Base class for every failure of the reasoning oracle."""


class OracleTransportError(OracleError):
    """Network, timeout or HTTP status failure."""


class OracleResponseError(OracleError):
    """The oracle answered, but the answer could not be turned into a report."""


class SafetyOracle(Protocol):
    """
    Protocol interface for the external safety reasoning oracle.

    Implementations may block for network-latency-scale durations and may
    raise any exception. Callers must go through
    :func:`safetyhalo.oracle.boundary.request_report`, which captures every
    failure; :func:`safetyhalo.oracle.boundary.resolve_report` then turns a
    failure into the communication fallback report.

    Methods
    -------
    evaluate(context)
        Produce a structured safety report for a context.
    """

    def evaluate(self, context: RoomContext) -> SafetyReport:
        """
        Evaluate a room context.

        Parameters
        ----------
        context
            Context to evaluate.

        Returns
        -------
        SafetyReport
            The oracle's assessment.
        """
        ...
