"""Core enums used across modules."""

from enum import StrEnum


class OrderStatusEnum(StrEnum):
    """Order lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"


class PaymentStatusEnum(StrEnum):
    """Payment processing status of an order."""

    PENDING = "pending"
    PAID = "paid"


class PaymentMethodEnum(StrEnum):
    """Known payment methods."""

    FREE = "free"
    PAYPAL = "paypal"


class NotificationStatusEnum(StrEnum):
    """Delivery status of a user notification."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class OutboxStatusEnum(StrEnum):
    """Outbox event status for integration publishing."""

    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


class GatewayErrorKind(StrEnum):
    """Failure categories reported by the payment gateway adapter."""

    AUTH = "auth"
    REJECTED = "rejected"
    UNAVAILABLE = "unavailable"
    INVALID_RESPONSE = "invalid_response"


class GenerationErrorKind(StrEnum):
    """Failure categories reported by the generative AI client."""

    AUTH = "auth"
    QUOTA = "quota"
    BLOCKED = "blocked"
    UNAVAILABLE = "unavailable"
    INVALID_RESPONSE = "invalid_response"
