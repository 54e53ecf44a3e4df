from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest

from app.core.config import Settings
from app.core.enums import GatewayErrorKind
from app.modules.payments.gateway import (
    CreatedPayment,
    PaymentGatewayError,
    PayPalGateway,
    build_sale_request,
)

SANDBOX = "https://api-m.sandbox.paypal.com"


def make_sale(amount: str = "499"):
    settings = Settings(_env_file=None, client_url="https://learn.example.com")
    return build_sale_request(
        settings,
        course_id="c2",
        course_title="System Design",
        amount=Decimal(amount),
    )


def make_gateway(handler) -> PayPalGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PayPalGateway(client=client, client_id="id", client_secret="secret", mode="sandbox")


def paypal_handler(
    payment_status: int = 201,
    payment_body: dict | None = None,
    token_status: int = 200,
):
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/v1/oauth2/token":
            return httpx.Response(token_status, json={"access_token": "A21AA", "token_type": "Bearer"})
        if request.url.path == "/v1/payments/payment":
            body = payment_body
            if body is None:
                body = {
                    "id": "PAY-1",
                    "state": "created",
                    "links": [
                        {"href": f"{SANDBOX}/v1/payments/payment/PAY-1", "rel": "self", "method": "GET"},
                        {
                            "href": "https://www.sandbox.paypal.com/cgi-bin/webscr?token=EC-1",
                            "rel": "approval_url",
                            "method": "REDIRECT",
                        },
                    ],
                }
            return httpx.Response(payment_status, json=body)
        return httpx.Response(404)

    return handler, calls


def test_sale_payload_formats_price_and_redirects() -> None:
    payload = make_sale("499.5").to_payload()

    assert payload["intent"] == "sale"
    assert payload["payer"] == {"payment_method": "paypal"}
    assert payload["redirect_urls"] == {
        "return_url": "https://learn.example.com/payment-return",
        "cancel_url": "https://learn.example.com/payment-cancel",
    }
    transaction = payload["transactions"][0]
    assert transaction["item_list"]["items"] == [
        {
            "name": "System Design",
            "sku": "c2",
            "price": "499.50",
            "currency": "INR",
            "quantity": 1,
        },
    ]
    assert transaction["amount"] == {"currency": "INR", "total": "499.50"}
    assert transaction["description"] == "System Design"


@pytest.mark.asyncio
async def test_create_payment_authenticates_and_returns_approval_url() -> None:
    handler, calls = paypal_handler()
    gateway = make_gateway(handler)

    payment = await gateway.create_payment(make_sale())

    assert payment.payment_id == "PAY-1"
    assert payment.approval_url() == "https://www.sandbox.paypal.com/cgi-bin/webscr?token=EC-1"
    token_call, payment_call = calls
    assert str(token_call.url) == f"{SANDBOX}/v1/oauth2/token"
    assert token_call.headers["Authorization"].startswith("Basic ")
    assert payment_call.headers["Authorization"] == "Bearer A21AA"
    assert json.loads(payment_call.content)["transactions"][0]["amount"]["total"] == "499.00"


@pytest.mark.asyncio
async def test_rejected_credentials_are_reported_as_auth_error() -> None:
    handler, calls = paypal_handler(token_status=401)
    gateway = make_gateway(handler)

    with pytest.raises(PaymentGatewayError) as exc:
        await gateway.create_payment(make_sale())

    assert exc.value.kind == GatewayErrorKind.AUTH
    assert len(calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "kind"),
    [
        (400, GatewayErrorKind.REJECTED),
        (422, GatewayErrorKind.REJECTED),
        (503, GatewayErrorKind.UNAVAILABLE),
    ],
)
async def test_provider_errors_map_to_error_kinds(status_code: int, kind: GatewayErrorKind) -> None:
    handler, _ = paypal_handler(
        payment_status=status_code,
        payment_body={"name": "VALIDATION_ERROR", "debug_id": "dbg-1"},
    )
    gateway = make_gateway(handler)

    with pytest.raises(PaymentGatewayError) as exc:
        await gateway.create_payment(make_sale())

    assert exc.value.kind == kind
    assert exc.value.detail == {"name": "VALIDATION_ERROR", "debug_id": "dbg-1"}


@pytest.mark.asyncio
async def test_transport_error_is_reported_as_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    gateway = make_gateway(handler)

    with pytest.raises(PaymentGatewayError) as exc:
        await gateway.create_payment(make_sale())

    assert exc.value.kind == GatewayErrorKind.UNAVAILABLE


@pytest.mark.asyncio
async def test_malformed_payment_response_is_invalid_response() -> None:
    handler, _ = paypal_handler(payment_body={"state": "created"})
    gateway = make_gateway(handler)

    with pytest.raises(PaymentGatewayError) as exc:
        await gateway.create_payment(make_sale())

    assert exc.value.kind == GatewayErrorKind.INVALID_RESPONSE


def test_approval_url_missing_raises_invalid_response() -> None:
    payment = CreatedPayment.from_payload(
        {"id": "PAY-2", "links": [{"href": "https://x", "rel": "self"}]},
    )

    with pytest.raises(PaymentGatewayError) as exc:
        payment.approval_url()

    assert exc.value.kind == GatewayErrorKind.INVALID_RESPONSE
