"""Order ORM model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin
from app.core.enums import OrderStatusEnum, PaymentStatusEnum


class Order(BaseModelMixin, Base):
    """One purchase attempt of a course, free or paid."""

    __tablename__ = "orders"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)

    course_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    course_title: Mapped[str] = mapped_column(String(255), nullable=False)
    course_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    course_pricing: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    instructor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    instructor_name: Mapped[str] = mapped_column(String(255), nullable=False)

    order_status: Mapped[OrderStatusEnum] = mapped_column(
        SAEnum(OrderStatusEnum, name="order_status_enum", native_enum=False),
        default=OrderStatusEnum.PENDING,
        nullable=False,
    )
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False)
    payment_status: Mapped[PaymentStatusEnum] = mapped_column(
        SAEnum(PaymentStatusEnum, name="payment_status_enum", native_enum=False),
        default=PaymentStatusEnum.PENDING,
        nullable=False,
    )
    payment_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    payer_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
