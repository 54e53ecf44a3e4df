from __future__ import annotations

import pytest
from fastapi import Request, Response

import app.main as main_module
from app.core.metrics import (
    PAYMENT_GATEWAY_FAILURES_TOTAL,
    build_metrics_response,
    instrument_http_request,
)


def _make_request(path: str, method: str = "GET") -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": [],
        "client": ("127.0.0.1", 12345),
        "scheme": "http",
        "server": ("testserver", 80),
        "query_string": b"",
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_http_metrics_instrumentation_tracks_status_and_path() -> None:
    async def _created(_: Request) -> Response:
        return Response(status_code=201)

    request = _make_request("/api/v1/student/order/create", method="POST")
    await instrument_http_request(request, _created)

    payload = build_metrics_response().body.decode("utf-8")
    assert "learnhub_http_requests_total" in payload
    assert 'path="/api/v1/student/order/create"' in payload
    assert 'status_code="201"' in payload


@pytest.mark.asyncio
async def test_failed_handler_is_counted_as_500() -> None:
    async def _boom(_: Request) -> Response:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await instrument_http_request(_make_request("/boom"), _boom)

    payload = build_metrics_response().body.decode("utf-8")
    assert 'path="/boom",status_code="500"' in payload


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_purchase_flow_counters() -> None:
    PAYMENT_GATEWAY_FAILURES_TOTAL.labels(kind="unavailable").inc()

    response = await main_module.metrics_endpoint(_make_request("/metrics"))
    payload = response.body.decode("utf-8")

    assert response.status_code == 200
    assert "learnhub_payment_gateway_failures_total" in payload
    assert 'kind="unavailable"' in payload
