import asyncio
import json
import logging

import httpx
import pytest

from app.features.execution.errors import (
    AuthenticationFailure,
    ExecutionTimeout,
    RateLimited,
    RemoteError,
    ServiceUnconfigured,
    TransportUnavailable,
)
from app.features.execution.languages import resolve
from app.features.execution.service import ExecutionOutcome, ExecutionRequest, JDoodleService


def _service(settings, handler):
    return JDoodleService(settings, transport=httpx.MockTransport(handler))


def _request(stdin=""):
    return ExecutionRequest(language=resolve("python"), source="print(input())", stdin=stdin)


def test_run_sends_wire_payload(settings):
    captured = {}

    def handler(request: httpx.Request):
        captured["url"] = str(request.url)
        captured["json"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"output": "hi\n", "statusCode": 200, "memory": "7340", "cpuTime": "0.02"},
        )

    outcome = asyncio.run(_service(settings, handler).run(_request(stdin="hi")))

    assert captured["url"] == "https://jdoodle.test/v1/execute"
    assert captured["json"] == {
        "clientId": "client-id",
        "clientSecret": "client-secret",
        "script": "print(input())",
        "language": "python3",
        "versionIndex": "3",
        "stdin": "hi",
    }
    assert outcome == ExecutionOutcome(stdout="hi\n", stderr="", status_code=200, memory_used="7340", cpu_time="0.02")


def test_missing_fields_default_to_empty_strings(settings):
    def handler(request):
        return httpx.Response(200, json={"output": None})

    outcome = asyncio.run(_service(settings, handler).run(_request()))

    assert outcome.stdout == ""
    assert outcome.stderr == ""
    assert outcome.memory_used == ""
    assert outcome.cpu_time == ""
    assert outcome.status_code == 200


def test_program_failure_is_not_an_orchestrator_error(settings):
    def handler(request):
        return httpx.Response(200, json={"output": "Traceback ...", "error": "NameError", "statusCode": 1})

    outcome = asyncio.run(_service(settings, handler).run(_request()))

    assert outcome.status_code == 1
    assert outcome.stderr == "NameError"


def test_unconfigured_service_never_calls_remote(unconfigured_settings):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    service = _service(unconfigured_settings, handler)
    with pytest.raises(ServiceUnconfigured):
        asyncio.run(service.run(_request()))
    with pytest.raises(ServiceUnconfigured):
        asyncio.run(service.fetch_quota())
    assert calls == []


@pytest.mark.parametrize(
    "status, body, expected",
    [
        (401, {"error": "Unauthorized"}, AuthenticationFailure),
        (429, {"error": "Daily limit reached"}, RateLimited),
        (500, {"error": "Internal"}, RemoteError),
    ],
)
def test_error_statuses_are_classified(settings, status, body, expected):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(status, json=body)

    with pytest.raises(expected):
        asyncio.run(_service(settings, handler).run(_request()))
    # one attempt, no retry
    assert len(calls) == 1


def test_remote_error_keeps_detail(settings):
    def handler(request):
        return httpx.Response(400, json={"error": "Invalid versionIndex"})

    with pytest.raises(RemoteError) as info:
        asyncio.run(_service(settings, handler).run(_request()))
    assert info.value.detail == "Invalid versionIndex"


def test_transport_timeout_is_classified(settings):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ExecutionTimeout):
        asyncio.run(_service(settings, handler).run(_request()))


def test_timeout_budget_is_enforced(settings):
    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"output": "late"})

    with pytest.raises(ExecutionTimeout):
        asyncio.run(_service(settings, handler).run(_request(), timeout_s=0.05))


def test_connection_failure_is_transport_unavailable(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportUnavailable):
        asyncio.run(_service(settings, handler).run(_request()))


def test_non_json_success_body_is_remote_error(settings):
    def handler(request):
        return httpx.Response(200, text="not json")

    with pytest.raises(RemoteError):
        asyncio.run(_service(settings, handler).run(_request()))


def test_fetch_quota_passes_body_through(settings):
    captured = {}

    def handler(request):
        captured["url"] = str(request.url)
        captured["json"] = json.loads(request.content)
        return httpx.Response(200, json={"used": 17, "extra": {"plan": "free"}})

    info = asyncio.run(_service(settings, handler).fetch_quota())

    assert info == {"used": 17, "extra": {"plan": "free"}}
    assert captured["url"] == "https://jdoodle.test/v1/credit-spent"
    assert captured["json"] == {"clientId": "client-id", "clientSecret": "client-secret"}


def test_fetch_quota_timeout_is_classified(settings):
    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"used": 1})

    with pytest.raises(ExecutionTimeout):
        asyncio.run(_service(settings, handler).fetch_quota(timeout_s=0.05))


def test_fetch_quota_uses_quota_budget(settings):
    settings.quota_timeout_s = 0.05

    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"used": 1})

    with pytest.raises(ExecutionTimeout):
        asyncio.run(_service(settings, handler).fetch_quota())


def test_run_uses_execute_budget(settings):
    settings.execute_timeout_s = 0.05

    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json={"output": "late"})

    with pytest.raises(ExecutionTimeout):
        asyncio.run(_service(settings, handler).run(_request()))


def test_fetch_quota_returns_non_object_body_unchanged(settings):
    def handler(request):
        return httpx.Response(200, json=[1, 2, 3])

    assert asyncio.run(_service(settings, handler).fetch_quota()) == [1, 2, 3]


def test_run_rejects_non_object_body(settings):
    def handler(request):
        return httpx.Response(200, json=["output"])

    with pytest.raises(RemoteError):
        asyncio.run(_service(settings, handler).run(_request()))


def test_debug_log_redacts_client_secret(settings, caplog):
    def handler(request):
        return httpx.Response(200, json={"output": "ok"})

    with caplog.at_level(logging.DEBUG, logger="app.features.execution.service"):
        asyncio.run(_service(settings, handler).run(_request()))

    assert "jdoodle request" in caplog.text
    assert "client-secret" not in caplog.text
    assert "[REDACTED]" in caplog.text
