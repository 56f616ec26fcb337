"""
Tests for request-id propagation in logs.
"""
import asyncio
import json
import logging

import pytest
from starlette.requests import Request
from starlette.responses import Response

from openimmo_sync_service.utils.logging_config import (
    JsonFormatter,
    RequestIdFilter,
    RequestIdMiddleware,
    current_request_id,
)


async def _app(scope, receive, send):
    pass


def make_request(request_id=None):
    headers = [(b"x-request-id", request_id.encode())] if request_id else []
    return Request({"type": "http", "method": "GET", "path": "/api/cron", "headers": headers})


@pytest.mark.asyncio
async def test_overlapping_requests_keep_their_own_id():
    middleware = RequestIdMiddleware(_app)
    seen = {}

    async def slow_call_next(request):
        await asyncio.sleep(0.05)
        seen["a"] = current_request_id()
        return Response()

    async def fast_call_next(request):
        seen["b"] = current_request_id()
        return Response()

    response_a, response_b = await asyncio.gather(
        middleware.dispatch(make_request("req-a"), slow_call_next),
        middleware.dispatch(make_request("req-b"), fast_call_next),
    )

    assert seen == {"a": "req-a", "b": "req-b"}
    assert response_a.headers["X-Request-ID"] == "req-a"
    assert response_b.headers["X-Request-ID"] == "req-b"
    assert current_request_id() is None


@pytest.mark.asyncio
async def test_background_run_keeps_id_after_response():
    middleware = RequestIdMiddleware(_app)
    seen = []
    background = []

    async def run_in_background():
        await asyncio.sleep(0.05)
        seen.append(current_request_id())

    async def call_next(request):
        background.append(asyncio.create_task(run_in_background()))
        return Response()

    await middleware.dispatch(make_request("req-bg"), call_next)
    assert current_request_id() is None

    await background[0]
    assert seen == ["req-bg"]


@pytest.mark.asyncio
async def test_missing_header_gets_generated_id():
    middleware = RequestIdMiddleware(_app)

    response = await middleware.dispatch(make_request(), lambda request: asyncio.sleep(0, Response()))

    assert len(response.headers["X-Request-ID"]) == 36


def test_json_formatter_includes_request_id():
    record = logging.LogRecord("openimmo_sync_service", logging.INFO, __file__, 10, "synced %s", ("OBID-9",), None)
    record.request_id = "req-json"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "synced OBID-9"
    assert payload["request_id"] == "req-json"
    assert payload["level"] == "INFO"


def test_filter_marks_records_outside_requests():
    record = logging.LogRecord("openimmo_sync_service", logging.INFO, __file__, 10, "cli run", (), None)

    assert RequestIdFilter().filter(record) is True
    assert record.request_id == "-"
    assert "request_id" not in json.loads(JsonFormatter().format(record))
