"""Local error taxonomy for calls to the remote execution service.

Every failed call ends up as exactly one ``ExecutionError`` subclass. The
transport layer first reduces whatever happened (an HTTP status, a timeout, a
dropped connection) to a ``CallOutcome``; ``classify`` then maps that value to
the error. Single-run and batch paths share this one function.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

UNKNOWN_ERROR = "Unknown error"


class ExecutionError(Exception):
    """Base class; ``http_status`` and ``message`` drive the API response."""

    http_status: int = 500
    message: str = "Code execution failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_payload(self) -> Dict[str, Any]:
        return {"message": self.message}


class UnsupportedLanguage(ExecutionError):
    http_status = 400
    message = "Unsupported language"

    def __init__(self, supported: List[str]) -> None:
        self.supported = list(supported)
        super().__init__()

    def to_payload(self) -> Dict[str, Any]:
        return {"message": self.message, "supportedLanguages": self.supported}


class ServiceUnconfigured(ExecutionError):
    http_status = 500
    message = "Code execution service not configured"


class AuthenticationFailure(ExecutionError):
    # the caller is fine, our credentials are not
    http_status = 500
    message = "Code execution service authentication failed"


class RateLimited(ExecutionError):
    http_status = 429
    message = "Rate limit exceeded. Please try again later."


class ExecutionTimeout(ExecutionError):
    http_status = 408
    message = "Code execution timeout. Please try again."


class RemoteError(ExecutionError):
    http_status = 500
    message = "Code execution failed"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or UNKNOWN_ERROR
        super().__init__()

    def to_payload(self) -> Dict[str, Any]:
        return {"message": self.message, "error": self.detail}


class TransportUnavailable(ExecutionError):
    http_status = 500
    message = "Code execution service unavailable"


@dataclass(frozen=True)
class CallOutcome:
    """What a failed remote call looked like, stripped of library specifics."""

    status_code: Optional[int] = None
    timed_out: bool = False
    connection_failed: bool = False
    detail: Optional[str] = None


def _error_detail(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("error")
        if isinstance(detail, str) and detail.strip():
            return detail
    return None


def outcome_from_response(response: httpx.Response) -> CallOutcome:
    return CallOutcome(status_code=response.status_code, detail=_error_detail(response))


def outcome_from_exception(exc: httpx.HTTPError) -> CallOutcome:
    if isinstance(exc, httpx.TimeoutException):
        return CallOutcome(timed_out=True)
    if isinstance(exc, httpx.HTTPStatusError):
        return outcome_from_response(exc.response)
    return CallOutcome(connection_failed=True)


def classify(outcome: CallOutcome) -> ExecutionError:
    if outcome.timed_out:
        return ExecutionTimeout()
    status = outcome.status_code
    if status is None:
        return TransportUnavailable()
    if status == 401:
        return AuthenticationFailure()
    if status == 429:
        return RateLimited()
    return RemoteError(outcome.detail)


__all__ = [
    "ExecutionError",
    "UnsupportedLanguage",
    "ServiceUnconfigured",
    "AuthenticationFailure",
    "RateLimited",
    "ExecutionTimeout",
    "RemoteError",
    "TransportUnavailable",
    "CallOutcome",
    "outcome_from_response",
    "outcome_from_exception",
    "classify",
    "UNKNOWN_ERROR",
]
