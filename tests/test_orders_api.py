from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from decimal import Decimal
from types import SimpleNamespace
from uuid import UUID, uuid4

import httpx
import pytest
import pytest_asyncio

from app.core.enums import OrderStatusEnum, PaymentStatusEnum
from app.main import app
from app.modules.orders.schemas import OrderCapture, OrderCreate, OrderPlacement
from app.modules.orders.service import get_order_service
from app.shared.exceptions import NotFoundException, PaymentGatewayException

PREFIX = "/api/v1/student/order"
NOW = datetime(2026, 10, 1, 9, 30, tzinfo=UTC)


def make_order(**overrides) -> SimpleNamespace:
    fields = {
        "id": uuid4(),
        "user_id": "u1",
        "user_name": "Asha",
        "user_email": "asha@example.com",
        "course_id": "c1",
        "course_title": "Intro",
        "course_image": None,
        "course_pricing": Decimal("0.00"),
        "instructor_id": "i1",
        "instructor_name": "Ravi",
        "order_status": OrderStatusEnum.CONFIRMED,
        "payment_method": "free",
        "payment_status": PaymentStatusEnum.PAID,
        "payment_id": None,
        "payer_id": None,
        "order_date": NOW,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class StubOrderService:
    def __init__(self) -> None:
        self.orders: dict[UUID, SimpleNamespace] = {}
        self.create_error: Exception | None = None
        self.received: list[OrderCreate] = []

    async def create_order(self, payload: OrderCreate) -> OrderPlacement:
        self.received.append(payload)
        if self.create_error is not None:
            raise self.create_error
        if payload.course_pricing == 0:
            order = make_order(course_id=payload.course_id)
            self.orders[order.id] = order
            return OrderPlacement(order=order, approve_url=None)
        order = make_order(
            course_id=payload.course_id,
            course_pricing=payload.course_pricing,
            order_status=OrderStatusEnum.PENDING,
            payment_status=PaymentStatusEnum.PENDING,
            payment_method="paypal",
        )
        self.orders[order.id] = order
        return OrderPlacement(order=order, approve_url="https://paypal.test/approve")

    async def capture_payment(self, payload: OrderCapture) -> SimpleNamespace:
        order = self.orders.get(payload.order_id)
        if order is None:
            raise NotFoundException("Order can not be found")
        order.order_status = OrderStatusEnum.CONFIRMED
        order.payment_status = PaymentStatusEnum.PAID
        order.payment_id = payload.payment_id
        order.payer_id = payload.payer_id
        return order


@pytest.fixture
def stub_service() -> StubOrderService:
    return StubOrderService()


@pytest_asyncio.fixture
async def client(stub_service: StubOrderService) -> AsyncIterator[httpx.AsyncClient]:
    app.dependency_overrides[get_order_service] = lambda: stub_service
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


def intent(price: str) -> dict:
    return {
        "userId": "u1",
        "userName": "Asha",
        "userEmail": "asha@example.com",
        "courseId": "c1",
        "courseTitle": "Intro",
        "instructorId": "i1",
        "instructorName": "Ravi",
        "coursePricing": price,
        "orderDate": NOW.isoformat(),
    }


@pytest.mark.asyncio
async def test_free_purchase_returns_envelope_without_approve_url(client: httpx.AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/create", json=intent("0"))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Free course enrolled successfully."
    assert body["data"]["approveUrl"] is None
    assert UUID(body["data"]["orderId"])


@pytest.mark.asyncio
async def test_paid_purchase_returns_approve_url(client: httpx.AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/create", json=intent("499"))

    assert response.status_code == 201
    assert response.json()["data"]["approveUrl"] == "https://paypal.test/approve"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "broken",
    [
        {"coursePricing": "-1"},
        {"userId": "   "},
        {"courseId": ""},
        {"orderDate": "not-a-date"},
    ],
)
async def test_invalid_purchase_body_is_rejected_before_service(
    client: httpx.AsyncClient,
    stub_service: StubOrderService,
    broken: dict,
) -> None:
    response = await client.post(f"{PREFIX}/create", json={**intent("0"), **broken})

    assert response.status_code == 422
    assert stub_service.received == []


@pytest.mark.asyncio
async def test_gateway_failure_returns_generic_500(
    client: httpx.AsyncClient,
    stub_service: StubOrderService,
) -> None:
    stub_service.create_error = PaymentGatewayException("Error while creating paypal payment!")

    response = await client.post(f"{PREFIX}/create", json=intent("499"))

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Error while creating paypal payment!",
        "error": {
            "code": "payment_gateway_error",
            "message": "Error while creating paypal payment!",
        },
    }


@pytest.mark.asyncio
async def test_unexpected_failure_returns_generic_500(
    client: httpx.AsyncClient,
    stub_service: StubOrderService,
) -> None:
    stub_service.create_error = RuntimeError("connection reset by peer")

    response = await client.post(f"{PREFIX}/create", json=intent("0"))

    assert response.status_code == 500
    assert "connection reset" not in response.text
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_capture_confirms_order(client: httpx.AsyncClient) -> None:
    created = await client.post(f"{PREFIX}/create", json=intent("499"))
    order_id = created.json()["data"]["orderId"]

    response = await client.post(
        f"{PREFIX}/capture",
        json={"paymentId": "PAY-1", "payerId": "PAYER-9", "orderId": order_id},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Order confirmed"
    assert body["data"]["orderStatus"] == "confirmed"
    assert body["data"]["paymentStatus"] == "paid"
    assert body["data"]["paymentId"] == "PAY-1"
    assert body["data"]["payerId"] == "PAYER-9"


@pytest.mark.asyncio
async def test_capture_unknown_order_returns_404(client: httpx.AsyncClient) -> None:
    response = await client.post(
        f"{PREFIX}/capture",
        json={"paymentId": "PAY-1", "payerId": "PAYER-9", "orderId": str(uuid4())},
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Order can not be found"
