"""Payment gateway adapter.

Only the create-payment half of the PayPal REST v1 payments API is used: the
service asks PayPal for a ``sale`` payment and hands the purchaser the
``approval_url`` link. Confirmation arrives later through the capture endpoint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol

import httpx
from fastapi import Request

from app.core.config import Settings
from app.core.enums import GatewayErrorKind
from app.shared.utils import format_amount

logger = logging.getLogger(__name__)

PAYPAL_BASE_URLS = {
    "sandbox": "https://api-m.sandbox.paypal.com",
    "live": "https://api-m.paypal.com",
}
APPROVAL_LINK_REL = "approval_url"


class PaymentGatewayError(Exception):
    """Payment provider call failed.

    ``kind`` tells callers what went wrong; ``detail`` is the provider payload and is
    only meant for logs.
    """

    def __init__(self, kind: GatewayErrorKind, message: str, detail: Any = None) -> None:
        self.kind = kind
        self.message = message
        self.detail = detail
        super().__init__(message)


@dataclass(slots=True, frozen=True)
class SaleRequest:
    """Provider-neutral description of a single-item sale."""

    item_name: str
    sku: str
    amount: Decimal
    currency: str
    return_url: str
    cancel_url: str
    payment_method: str = "paypal"
    description: str | None = None

    def to_payload(self) -> dict[str, Any]:
        price = format_amount(self.amount)
        return {
            "intent": "sale",
            "payer": {"payment_method": self.payment_method},
            "redirect_urls": {
                "return_url": self.return_url,
                "cancel_url": self.cancel_url,
            },
            "transactions": [
                {
                    "item_list": {
                        "items": [
                            {
                                "name": self.item_name,
                                "sku": self.sku,
                                "price": price,
                                "currency": self.currency,
                                "quantity": 1,
                            },
                        ],
                    },
                    "amount": {"currency": self.currency, "total": price},
                    "description": self.description or self.item_name,
                },
            ],
        }


@dataclass(slots=True, frozen=True)
class PaymentLink:
    href: str
    rel: str
    method: str | None = None


@dataclass(slots=True, frozen=True)
class CreatedPayment:
    """Provider answer to a successful create-payment call."""

    payment_id: str
    links: list[PaymentLink] = field(default_factory=list)

    def approval_url(self) -> str:
        """Return the redirect target the purchaser must visit to approve the charge."""
        for link in self.links:
            if link.rel == APPROVAL_LINK_REL:
                return link.href
        raise PaymentGatewayError(
            GatewayErrorKind.INVALID_RESPONSE,
            "Payment response has no approval link",
            detail={"payment_id": self.payment_id, "links": [link.rel for link in self.links]},
        )

    @classmethod
    def from_payload(cls, payload: Any) -> CreatedPayment:
        try:
            links = [
                PaymentLink(href=item["href"], rel=item["rel"], method=item.get("method"))
                for item in payload.get("links", [])
            ]
            return cls(payment_id=str(payload["id"]), links=links)
        except (AttributeError, KeyError, TypeError) as exc:
            raise PaymentGatewayError(
                GatewayErrorKind.INVALID_RESPONSE,
                "Malformed create-payment response",
                detail=payload,
            ) from exc


class PaymentGateway(Protocol):
    """Contract of an external payment provider."""

    provider_name: str

    async def create_payment(self, request: SaleRequest) -> CreatedPayment:
        """Create a payment awaiting purchaser approval."""


def build_sale_request(
    settings: Settings,
    *,
    course_id: str,
    course_title: str,
    amount: Decimal,
    payment_method: str = "paypal",
) -> SaleRequest:
    """Build sale request redirecting back to the client app."""
    return SaleRequest(
        item_name=course_title,
        sku=course_id,
        amount=amount,
        currency=settings.payment_currency,
        return_url=f"{settings.client_url}/payment-return",
        cancel_url=f"{settings.client_url}/payment-cancel",
        payment_method=payment_method,
        description=course_title,
    )


def _response_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class PayPalGateway:
    """PayPal REST v1 payments over a shared ``httpx.AsyncClient``."""

    provider_name = "paypal"

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        mode: str = "sandbox",
    ) -> None:
        self.client = client
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = PAYPAL_BASE_URLS[mode]

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> PayPalGateway:
        return cls(
            client=client,
            client_id=settings.paypal_client_id or "",
            client_secret=settings.paypal_client_secret or "",
            mode=settings.paypal_mode,
        )

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.post(f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(
                GatewayErrorKind.UNAVAILABLE,
                "PayPal is unreachable",
                detail=repr(exc),
            ) from exc

    async def _access_token(self) -> str:
        response = await self._post(
            "/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
        )
        if response.status_code in (400, 401, 403):
            raise PaymentGatewayError(
                GatewayErrorKind.AUTH,
                "PayPal rejected client credentials",
                detail=_response_detail(response),
            )
        if response.is_error:
            raise PaymentGatewayError(
                GatewayErrorKind.UNAVAILABLE,
                "PayPal token endpoint failed",
                detail=_response_detail(response),
            )
        token = _response_detail(response)
        if not isinstance(token, dict) or not token.get("access_token"):
            raise PaymentGatewayError(
                GatewayErrorKind.INVALID_RESPONSE,
                "PayPal token response has no access_token",
                detail=token,
            )
        return str(token["access_token"])

    async def create_payment(self, request: SaleRequest) -> CreatedPayment:
        token = await self._access_token()
        response = await self._post(
            "/v1/payments/payment",
            json=request.to_payload(),
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
        )
        if response.status_code == 401:
            raise PaymentGatewayError(
                GatewayErrorKind.AUTH,
                "PayPal rejected access token",
                detail=_response_detail(response),
            )
        if response.is_server_error:
            raise PaymentGatewayError(
                GatewayErrorKind.UNAVAILABLE,
                "PayPal failed to create payment",
                detail=_response_detail(response),
            )
        if response.is_error:
            raise PaymentGatewayError(
                GatewayErrorKind.REJECTED,
                "PayPal rejected payment",
                detail=_response_detail(response),
            )

        payment = CreatedPayment.from_payload(_response_detail(response))
        logger.info("PayPal payment %s created for sku %s", payment.payment_id, request.sku)
        return payment


def get_payment_gateway(request: Request) -> PaymentGateway:
    """Dependency provider returning the gateway built at startup."""
    return request.app.state.payment_gateway
