"""Orders repository layer."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import OrderStatusEnum, PaymentStatusEnum
from app.modules.orders.models import Order


class OrdersRepository:
    """DB access methods for orders."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_order(
        self,
        *,
        user_id: str,
        user_name: str,
        user_email: str,
        course_id: str,
        course_title: str,
        course_image: str | None,
        course_pricing: Decimal,
        instructor_id: str,
        instructor_name: str,
        order_status: OrderStatusEnum,
        payment_method: str,
        payment_status: PaymentStatusEnum,
        order_date: datetime,
    ) -> Order:
        order = Order(
            user_id=user_id,
            user_name=user_name,
            user_email=user_email,
            course_id=course_id,
            course_title=course_title,
            course_image=course_image,
            course_pricing=course_pricing,
            instructor_id=instructor_id,
            instructor_name=instructor_name,
            order_status=order_status,
            payment_method=payment_method,
            payment_status=payment_status,
            payment_id=None,
            payer_id=None,
            order_date=order_date,
        )
        self.session.add(order)
        await self.session.flush()
        return order

    async def end_read_transaction(self) -> None:
        """Commit the read-only transaction so its connection goes back to the pool."""
        await self.session.commit()

    async def get_order_by_id(self, order_id: UUID, for_update: bool = False) -> Order | None:
        stmt = select(Order).where(Order.id == order_id)
        if for_update:
            stmt = stmt.with_for_update()
        return await self.session.scalar(stmt)

    async def list_orders_by_user(
        self,
        user_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[Order], int]:
        base_stmt: Select[tuple[Order]] = select(Order).where(Order.user_id == user_id)
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Order.created_at.desc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def mark_paid(self, order: Order, payment_id: str, payer_id: str) -> Order:
        order.payment_status = PaymentStatusEnum.PAID
        order.order_status = OrderStatusEnum.CONFIRMED
        order.payment_id = payment_id
        order.payer_id = payer_id
        await self.session.flush()
        return order
