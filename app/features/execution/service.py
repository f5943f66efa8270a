from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from app.core.config import Settings, get_settings
from .errors import (
    CallOutcome,
    ExecutionError,
    RemoteError,
    ServiceUnconfigured,
    classify,
    outcome_from_exception,
    outcome_from_response,
)
from .languages import LanguageDescriptor

_SECRET_FIELDS = ("clientSecret",)


@dataclass(frozen=True)
class ExecutionRequest:
    language: LanguageDescriptor
    source: str
    stdin: str = ""


@dataclass(frozen=True)
class ExecutionOutcome:
    stdout: str = ""
    stderr: str = ""
    status_code: int = 200
    memory_used: str = ""
    cpu_time: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ExecutionOutcome":
        def _text(key: str) -> str:
            value = payload.get(key)
            return "" if value is None else str(value)

        raw_status = payload.get("statusCode")
        try:
            status_code = int(raw_status) if raw_status not in (None, "") else 200
        except (TypeError, ValueError):
            status_code = 200
        return cls(
            stdout=_text("output"),
            stderr=_text("error"),
            status_code=status_code,
            memory_used=_text("memory"),
            cpu_time=_text("cpuTime"),
        )


def _redact(payload: Dict[str, Any]) -> Dict[str, Any]:
    masked = {}
    for k, v in payload.items():
        if k in _SECRET_FIELDS:
            masked[k] = "[REDACTED]"
        elif k == "script":
            masked[k] = f"<{len(v or '')} chars>"
        else:
            masked[k] = v
    return masked


class JDoodleService:
    """Client for the remote execution service (execute + credit endpoints).

    Exactly one HTTP attempt per call; failures surface as ``ExecutionError``
    subclasses produced by ``errors.classify``.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        # Injected in tests (httpx.MockTransport); None means real network
        self._transport = transport
        self._logger = logging.getLogger(__name__)

    def ensure_configured(self) -> Dict[str, str]:
        """Return the credential fields or raise before any network activity."""
        if not self.settings.execution_configured:
            raise ServiceUnconfigured()
        return {
            "clientId": self.settings.jdoodle_client_id,
            "clientSecret": self.settings.jdoodle_client_secret,
        }

    async def _post(self, url: str, payload: Dict[str, Any], timeout_s: float) -> httpx.Response:
        self._logger.debug("jdoodle request: POST %s body=%s timeout_s=%s", url, _redact(payload), timeout_s)
        timeout = httpx.Timeout(timeout_s)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await asyncio.wait_for(client.post(url, json=payload), timeout=timeout_s)
        except asyncio.TimeoutError as exc:
            raise self._failed(url, CallOutcome(timed_out=True)) from exc
        except httpx.HTTPError as exc:
            raise self._failed(url, outcome_from_exception(exc)) from exc
        if not response.is_success:
            raise self._failed(url, outcome_from_response(response))
        return response

    def _failed(self, url: str, outcome: CallOutcome) -> ExecutionError:
        error = classify(outcome)
        self._logger.warning(
            "jdoodle call failed url=%s kind=%s status=%s timed_out=%s",
            url,
            error.kind,
            outcome.status_code,
            outcome.timed_out,
        )
        return error

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(f"Invalid response from execution service: {response.text[:200]}") from exc

    @staticmethod
    def _outcome(body: Any) -> ExecutionOutcome:
        if not isinstance(body, dict):
            raise RemoteError("Invalid response from execution service")
        return ExecutionOutcome.from_payload(body)

    async def run(self, request: ExecutionRequest, timeout_s: Optional[float] = None) -> ExecutionOutcome:
        """Execute ``request`` once. A non-zero program exit is still a success here."""
        credentials = self.ensure_configured()
        payload = {
            **credentials,
            "script": request.source,
            "language": request.language.runtime_name,
            "versionIndex": request.language.version_index,
            "stdin": request.stdin or "",
        }
        budget = timeout_s if timeout_s is not None else self.settings.execute_timeout_s
        response = await self._post(self.settings.jdoodle_execute_url, payload, budget)
        outcome = self._outcome(self._decode(response))
        self._logger.info(
            "jdoodle executed language=%s status=%s cpu=%s memory=%s",
            request.language.key,
            outcome.status_code,
            outcome.cpu_time or "-",
            outcome.memory_used or "-",
        )
        return outcome

    async def fetch_quota(self, timeout_s: Optional[float] = None) -> Any:
        """Credit usage as reported by the remote service, unmodified."""
        credentials = self.ensure_configured()
        budget = timeout_s if timeout_s is not None else self.settings.quota_timeout_s
        response = await self._post(self.settings.jdoodle_credit_url, credentials, budget)
        return self._decode(response)


__all__ = [
    "ExecutionRequest",
    "ExecutionOutcome",
    "JDoodleService",
]
