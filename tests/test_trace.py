"""
Tests for the trace context and the trace middleware.
"""

import asyncio
import uuid

from app.common.trace import get_trace_id, new_trace_id, reset_trace_id, run_with_trace, set_trace_id


def test_default_trace_id_is_dash() -> None:
    assert get_trace_id() == "-"


def test_new_trace_id_is_uuid() -> None:
    value = new_trace_id()
    assert str(uuid.UUID(value)) == value
    assert new_trace_id() != value


def test_set_and_reset_trace_id() -> None:
    token = set_trace_id("abc")
    assert get_trace_id() == "abc"
    reset_trace_id(token)
    assert get_trace_id() == "-"


def test_empty_trace_id_falls_back_to_dash() -> None:
    token = set_trace_id("")
    try:
        assert get_trace_id() == "-"
    finally:
        reset_trace_id(token)


def test_run_with_trace_does_not_leak() -> None:
    seen = run_with_trace("scoped-id", get_trace_id)
    assert seen == "scoped-id"
    assert get_trace_id() == "-"


def test_trace_id_propagates_into_spawned_tasks() -> None:
    async def child() -> str:
        await asyncio.sleep(0)
        return get_trace_id()

    async def parent() -> list:
        set_trace_id("request-1")
        return await asyncio.gather(child(), asyncio.create_task(child()))

    assert asyncio.run(parent()) == ["request-1", "request-1"]
    assert get_trace_id() == "-"


def test_concurrent_tasks_keep_their_own_trace_id() -> None:
    async def handle(trace_id: str) -> str:
        set_trace_id(trace_id)
        await asyncio.sleep(0.01)
        return get_trace_id()

    async def main() -> list:
        return await asyncio.gather(*(handle(f"t-{i}") for i in range(5)))

    assert asyncio.run(main()) == [f"t-{i}" for i in range(5)]


class TestTraceMiddleware:
    def test_generates_trace_id_header(self, client) -> None:
        response = client.get("/api/v1/users")
        assert response.status_code == 200
        trace_id = response.headers["X-Trace-Id"]
        assert str(uuid.UUID(trace_id)) == trace_id

    def test_echoes_incoming_trace_id(self, client) -> None:
        response = client.get("/api/v1/users", headers={"X-Trace-Id": "client-trace-42"})
        assert response.headers["X-Trace-Id"] == "client-trace-42"

    def test_accepts_request_id_header(self, client) -> None:
        response = client.get("/api/v1/users", headers={"X-Request-Id": "req-7"})
        assert response.headers["X-Trace-Id"] == "req-7"

    def test_error_body_carries_trace_id(self, client) -> None:
        response = client.get(
            f"/api/v1/users/{uuid.uuid4()}",
            headers={"X-Trace-Id": "trace-for-404"},
        )
        assert response.status_code == 404
        assert response.json()["trace_id"] == "trace-for-404"
        assert response.headers["X-Trace-Id"] == "trace-for-404"
