from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from safetyhalo.domain.models import RoomContext, SafetyReport
from safetyhalo.oracle.base import OracleResponseError, OracleTransportError
from safetyhalo.oracle.prompts import RESPONSE_SCHEMA, SYSTEM_INSTRUCTION
from safetyhalo.oracle.response import extract_json_object, parse_report


@dataclass(frozen=True)
class OracleClientConfig:
    """
    Connection settings for the HTTP reasoning oracle.

    Parameters
    ----------
    base_url
        Base URL of an OpenAI-compatible API (``.../v1``).
    model
        Model identifier.
    api_key
        Optional API key sent as a Bearer token.
    timeout_s
        HTTP request timeout in seconds.
    verify_tls
        Whether to verify TLS certificates.
    temperature
        Sampling temperature.
    """

    base_url: str
    model: str
    api_key: Optional[str] = None
    timeout_s: float = 15.0
    verify_tls: bool = True
    temperature: float = 0.2


class HttpSafetyOracle:
    """
    Reasoning oracle reached through one chat-completions request per context.

    The serialized `RoomContext` is sent as the user message together with the
    safety system instruction; the model is asked for a JSON object matching
    `RESPONSE_SCHEMA`.

    Notes
    -----
    - This class performs side effects (network I/O) and raises on failure;
      it never falls back by itself.
    - No retries: the next evaluation trigger is the only retry mechanism.
    """

    def __init__(self, cfg: OracleClientConfig):
        """
        Parameters
        ----------
        cfg
            Oracle client configuration.
        """
        self._cfg = cfg

    @property
    def endpoint(self) -> str:
        return self._cfg.base_url.rstrip("/") + "/chat/completions"

    def build_request(self, context: RoomContext) -> Dict[str, Any]:
        """
        Build the JSON request body for a context.
        """
        return {
            "model": self._cfg.model,
            "temperature": self._cfg.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {
                    "role": "system",
                    "content": SYSTEM_INSTRUCTION
                    + "\n\nResponse schema:\n"
                    + json.dumps(RESPONSE_SCHEMA),
                },
                {"role": "user", "content": json.dumps(context.to_dict())},
            ],
        }

    def evaluate(self, context: RoomContext) -> SafetyReport:
        """
        Send the context to the oracle and parse its answer.

        Parameters
        ----------
        context
            Context to evaluate.

        Returns
        -------
        SafetyReport
            Parsed report (absent fields defaulted).

        Raises
        ------
        OracleTransportError
            For network errors, timeouts and HTTP error statuses.
        OracleResponseError
            If the answer is not a usable JSON report.
        """
        headers = {"Content-Type": "application/json"}
        if self._cfg.api_key:
            headers["Authorization"] = f"Bearer {self._cfg.api_key}"

        try:
            r = requests.post(
                self.endpoint,
                json=self.build_request(context),
                headers=headers,
                timeout=self._cfg.timeout_s,
                verify=self._cfg.verify_tls,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            raise OracleTransportError(f"Oracle request failed: {e!r}") from e

        try:
            body = r.json()
        except ValueError as e:
            raise OracleResponseError("Oracle returned a non-JSON body") from e

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise OracleResponseError("Oracle response has no message content") from e

        return parse_report(extract_json_object(content))
