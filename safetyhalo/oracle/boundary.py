"""
Oracle call boundary.

The single place where oracle failures are caught. Callers receive an explicit
result type (success or failure) from :func:`request_report`, and
:func:`resolve_report` maps a failure onto the fixed communication fallback.
Nothing above this module handles oracle exceptions.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from concurrent.futures import wait
from dataclasses import dataclass
from typing import Optional, Union

from safetyhalo.core.gate.fallback import COMMUNICATION_FALLBACK_REPORT
from safetyhalo.domain.models import RoomContext, SafetyReport
from safetyhalo.oracle.base import OracleError, OracleResponseError, SafetyOracle

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class OracleSuccess:
    report: SafetyReport


@dataclass(frozen=True)
class OracleFailure:
    error: Exception


OracleResult = Union[OracleSuccess, OracleFailure]


class TimedOracleCaller:
    """
    Run oracle calls on one long-lived worker with a wall-clock limit.

    Concurrency Model
    -----------------
    - A single worker thread: at most one `evaluate` call runs at a time.
    - A call that times out keeps running in the background. The next call
      first waits up to `timeout_s` for it to finish; if it is still running
      the new call fails without being started.

    Parameters
    ----------
    timeout_s
        Wall-clock limit applied to each call.
    """

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="oracle-call")
        self._last: Optional[Future] = None
        self._lock = threading.Lock()

    def call(self, oracle: SafetyOracle, context: RoomContext) -> SafetyReport:
        """
        Raises
        ------
        OracleError
            If the call, or an earlier abandoned one, exceeds the limit.
        """
        with self._lock:
            if self._last is not None and not self._last.done():
                done, _ = wait([self._last], timeout=self.timeout_s)
                if not done:
                    raise OracleError("Previous oracle call is still running")
            future = self._pool.submit(oracle.evaluate, context)
            self._last = future

        try:
            return future.result(timeout=self.timeout_s)
        except FutureTimeout:
            raise OracleError(f"Oracle did not answer within {self.timeout_s:.1f}s") from None

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False)


def request_report(
    oracle: SafetyOracle,
    context: RoomContext,
    caller: Optional[TimedOracleCaller] = None,
) -> OracleResult:
    """
    Invoke the oracle once and capture the outcome.

    Parameters
    ----------
    oracle
        Oracle implementation.
    context
        Context to evaluate.
    caller
        Optional timed caller. Without one the call runs on the current
        thread with no time limit. A timeout is a failure.

    Returns
    -------
    OracleSuccess or OracleFailure
        Never raises for oracle-side problems.
    """
    try:
        if caller is None:
            report = oracle.evaluate(context)
        else:
            report = caller.call(oracle, context)
        if not isinstance(report, SafetyReport):
            raise OracleResponseError(f"Oracle returned {type(report).__name__}, not a SafetyReport")
        return OracleSuccess(report)
    except Exception as e:
        return OracleFailure(e)


def resolve_report(result: OracleResult) -> SafetyReport:
    """
    Map a result onto the report the pipeline continues with.
    """
    if isinstance(result, OracleSuccess):
        return result.report
    log.warning("Oracle call failed, using communication fallback: %r", result.error)
    return COMMUNICATION_FALLBACK_REPORT
