"""Order orchestration: purchase intents and payment confirmation.

A free course is enrolled immediately. A paid course first gets a provider payment
(no order is stored if that fails), then a pending order; enrollment happens only
when the client reports the approved payment back through ``capture_payment``.
Both branches end in the same ``EnrollmentService.enroll`` effect, and every write of
one call shares the request transaction.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import get_db_session
from app.core.enums import OrderStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from app.core.metrics import (
    ORDERS_CONFIRMED_TOTAL,
    ORDERS_CREATED_TOTAL,
    PAYMENT_GATEWAY_FAILURES_TOTAL,
)
from app.modules.audit.repository import AuditRepository
from app.modules.courses.repository import CoursesRepository
from app.modules.enrollments.schemas import EnrollmentGrant
from app.modules.enrollments.service import EnrollmentService, build_enrollment_service
from app.modules.orders.models import Order
from app.modules.orders.repository import OrdersRepository
from app.modules.orders.schemas import OrderCapture, OrderCreate, OrderPlacement
from app.modules.payments.gateway import (
    PaymentGateway,
    PaymentGatewayError,
    build_sale_request,
    get_payment_gateway,
)
from app.shared.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotFoundException,
    PaymentGatewayException,
)
from app.shared.utils import ensure_utc

logger = logging.getLogger(__name__)


def _order_payload(order: Order) -> dict:
    return {
        "user_id": order.user_id,
        "course_id": order.course_id,
        "course_title": order.course_title,
        "course_pricing": str(order.course_pricing),
        "order_status": str(order.order_status),
        "payment_method": order.payment_method,
        "payment_status": str(order.payment_status),
    }


class OrderService:
    """Order domain service."""

    def __init__(
        self,
        repository: OrdersRepository,
        courses_repository: CoursesRepository,
        enrollment_service: EnrollmentService,
        audit_repository: AuditRepository,
        gateway: PaymentGateway,
        settings: Settings,
    ) -> None:
        self.repository = repository
        self.courses_repository = courses_repository
        self.enrollment_service = enrollment_service
        self.audit_repository = audit_repository
        self.gateway = gateway
        self.settings = settings

    async def create_order(self, payload: OrderCreate) -> OrderPlacement:
        """Handle a purchase intent, branching on the course price."""
        if await self.courses_repository.get_course(payload.course_id) is None:
            raise NotFoundException("Course not found")

        if payload.course_pricing == 0:
            return await self._place_free_order(payload)
        return await self._place_paid_order(payload)

    async def _place_free_order(self, payload: OrderCreate) -> OrderPlacement:
        order = await self._store_order(
            payload,
            order_status=OrderStatusEnum.CONFIRMED,
            payment_method=PaymentMethodEnum.FREE,
            payment_status=PaymentStatusEnum.PAID,
        )
        await self._record_order_event(
            order,
            action="orders.order.create",
            event_type="orders.order.created",
            extra={},
        )
        await self.enrollment_service.enroll(self._grant(order, paid_amount=Decimal("0")))
        ORDERS_CREATED_TOTAL.labels(payment_method=PaymentMethodEnum.FREE).inc()
        return OrderPlacement(order=order, approve_url=None)

    async def _place_paid_order(self, payload: OrderCreate) -> OrderPlacement:
        if (
            payload.order_status != OrderStatusEnum.PENDING
            or payload.payment_status != PaymentStatusEnum.PENDING
        ):
            raise BusinessRuleException("Paid orders must start as pending")
        if payload.payment_method == PaymentMethodEnum.FREE:
            raise BusinessRuleException("Paid courses cannot use the free payment method")

        sale = build_sale_request(
            self.settings,
            course_id=payload.course_id,
            course_title=payload.course_title,
            amount=payload.course_pricing,
            payment_method=self.gateway.provider_name,
        )
        # No pooled connection stays checked out across the provider round trips.
        await self.repository.end_read_transaction()
        try:
            payment = await self.gateway.create_payment(sale)
            approve_url = payment.approval_url()
        except PaymentGatewayError as exc:
            logger.error(
                "Payment creation failed for course %s, user %s: %s (%s) detail=%r",
                payload.course_id,
                payload.user_id,
                exc.message,
                exc.kind,
                exc.detail,
            )
            PAYMENT_GATEWAY_FAILURES_TOTAL.labels(kind=exc.kind).inc()
            raise PaymentGatewayException("Error while creating paypal payment!") from exc

        try:
            order = await self._store_order(
                payload,
                order_status=payload.order_status,
                payment_method=payload.payment_method,
                payment_status=payload.payment_status,
            )
            await self._record_order_event(
                order,
                action="orders.order.create",
                event_type="orders.order.created",
                extra={"provider_payment_id": payment.payment_id},
            )
        except Exception:
            # TODO: void the provider payment once the gateway exposes a cancel call.
            logger.exception(
                "Provider payment %s was created but the order could not be stored",
                payment.payment_id,
            )
            raise

        ORDERS_CREATED_TOTAL.labels(payment_method=self.gateway.provider_name).inc()
        return OrderPlacement(order=order, approve_url=approve_url)

    async def capture_payment(self, payload: OrderCapture) -> Order:
        """Confirm a paid order and enroll the purchaser.

        Repeating the call with the same payment id is harmless; it re-applies the
        enrollment upserts, which also repairs an earlier partially applied run.
        """
        order = await self.repository.get_order_by_id(payload.order_id, for_update=True)
        if order is None:
            raise NotFoundException("Order can not be found")

        if order.order_status == OrderStatusEnum.CONFIRMED:
            if order.payment_id != payload.payment_id:
                raise ConflictException("Order is already confirmed with another payment")
            logger.info("Order %s already confirmed, re-applying enrollment", order.id)
        else:
            order = await self.repository.mark_paid(order, payload.payment_id, payload.payer_id)
            await self._record_order_event(
                order,
                action="orders.order.confirm",
                event_type="orders.order.confirmed",
                extra={"payment_id": order.payment_id, "payer_id": order.payer_id},
            )
            ORDERS_CONFIRMED_TOTAL.inc()

        await self.enrollment_service.enroll(
            self._grant(order, paid_amount=Decimal(order.course_pricing)),
        )
        return order

    async def get_order(self, order_id: UUID) -> Order:
        order = await self.repository.get_order_by_id(order_id)
        if order is None:
            raise NotFoundException("Order can not be found")
        return order

    async def list_user_orders(
        self,
        user_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[Order], int]:
        return await self.repository.list_orders_by_user(user_id, limit=limit, offset=offset)

    async def _store_order(
        self,
        payload: OrderCreate,
        *,
        order_status: OrderStatusEnum,
        payment_method: str,
        payment_status: PaymentStatusEnum,
    ) -> Order:
        return await self.repository.create_order(
            user_id=payload.user_id,
            user_name=payload.user_name,
            user_email=payload.user_email,
            course_id=payload.course_id,
            course_title=payload.course_title,
            course_image=payload.course_image,
            course_pricing=payload.course_pricing,
            instructor_id=payload.instructor_id,
            instructor_name=payload.instructor_name,
            order_status=order_status,
            payment_method=str(payment_method),
            payment_status=payment_status,
            order_date=ensure_utc(payload.order_date),
        )

    async def _record_order_event(
        self,
        order: Order,
        action: str,
        event_type: str,
        extra: dict,
    ) -> None:
        payload = {**_order_payload(order), **extra}
        await self.audit_repository.create_audit_log(
            actor_id=order.user_id,
            action=action,
            entity_type="order",
            entity_id=str(order.id),
            payload=payload,
        )
        await self.audit_repository.create_outbox_event(
            aggregate_type="orders",
            aggregate_id=str(order.id),
            event_type=event_type,
            payload={"order_id": str(order.id), **payload},
        )

    @staticmethod
    def _grant(order: Order, paid_amount: Decimal) -> EnrollmentGrant:
        return EnrollmentGrant(
            user_id=order.user_id,
            user_name=order.user_name,
            user_email=order.user_email,
            course_id=order.course_id,
            course_title=order.course_title,
            course_image=order.course_image,
            instructor_id=order.instructor_id,
            instructor_name=order.instructor_name,
            purchased_at=order.order_date,
            paid_amount=paid_amount,
        )


async def get_order_service(
    session: AsyncSession = Depends(get_db_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> OrderService:
    """Dependency provider for order service."""
    return OrderService(
        repository=OrdersRepository(session),
        courses_repository=CoursesRepository(session),
        enrollment_service=build_enrollment_service(session),
        audit_repository=AuditRepository(session),
        gateway=gateway,
        settings=get_settings(),
    )
