"""Outbox consumer that turns purchase and enrollment events into notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.core.enums import NotificationStatusEnum, PaymentStatusEnum
from app.modules.audit.models import OutboxEvent
from app.modules.audit.repository import AuditRepository
from app.modules.notifications.repository import NotificationsRepository
from app.shared.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NotificationMessage:
    user_id: str
    title: str
    body: str
    channel: str = "email"


class NotificationsOutboxWorker:
    """Process pending outbox events and create student notifications.

    Failed events are retried with exponential backoff until ``max_retries`` is reached;
    after that they stay ``failed`` for manual inspection.
    """

    def __init__(
        self,
        audit_repository: AuditRepository,
        notifications_repository: NotificationsRepository,
        *,
        batch_size: int = 100,
        max_retries: int = 5,
        base_backoff_seconds: int = 30,
        max_backoff_seconds: int = 300,
        now_provider=utc_now,
    ) -> None:
        self.audit_repository = audit_repository
        self.notifications_repository = notifications_repository
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.base_backoff_seconds = base_backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds
        self.now_provider = now_provider

    async def run_once(self) -> dict[str, int]:
        """Run one processing cycle."""
        stats = {"requeued": 0, "processed": 0, "failed": 0, "dispatched": 0}
        stats["requeued"] = await self._requeue_retryable_failed_events()

        events = await self.audit_repository.list_pending_outbox(limit=self.batch_size)
        for event in events:
            try:
                messages = self._build_messages(event)
                for message in messages:
                    notification = await self.notifications_repository.create_notification(
                        user_id=message.user_id,
                        channel=message.channel,
                        title=message.title,
                        body=message.body,
                    )
                    await self.notifications_repository.set_status(
                        notification,
                        NotificationStatusEnum.SENT,
                        self.now_provider(),
                    )
                    stats["dispatched"] += 1

                await self.audit_repository.mark_outbox_processed(event, self.now_provider())
                stats["processed"] += 1
            except Exception as exc:
                logger.warning("Outbox event %s (%s) failed: %s", event.id, event.event_type, exc)
                await self.audit_repository.mark_outbox_failed(event, str(exc))
                stats["failed"] += 1
        return stats

    async def _requeue_retryable_failed_events(self) -> int:
        now = self.now_provider()
        failed_events = await self.audit_repository.list_failed_outbox(
            limit=self.batch_size,
            max_retries=self.max_retries,
        )
        requeued = 0
        for event in failed_events:
            if self._is_backoff_elapsed(event, now):
                await self.audit_repository.mark_outbox_pending(event)
                requeued += 1
        return requeued

    def _is_backoff_elapsed(self, event: OutboxEvent, now: datetime) -> bool:
        retries = max(event.retries, 1)
        backoff_seconds = min(
            self.max_backoff_seconds,
            self.base_backoff_seconds * (2 ** (retries - 1)),
        )
        last_attempt_at = event.updated_at or event.occurred_at
        return now >= last_attempt_at + timedelta(seconds=backoff_seconds)

    def _build_messages(self, event: OutboxEvent) -> list[NotificationMessage]:
        payload = event.payload or {}
        event_type = event.event_type

        if event_type == "orders.order.created":
            # Free orders are announced by the enrollment event instead.
            if payload.get("payment_status") != PaymentStatusEnum.PENDING:
                return []
            return [
                NotificationMessage(
                    user_id=self._required(payload, "user_id"),
                    title="Complete your payment",
                    body=(
                        f"Your order for {payload.get('course_title', 'your course')} "
                        "is waiting for PayPal approval."
                    ),
                ),
            ]

        if event_type == "orders.order.confirmed":
            return [
                NotificationMessage(
                    user_id=self._required(payload, "user_id"),
                    title="Payment received",
                    body=(
                        f"We received your payment of {payload.get('course_pricing', '')} "
                        f"for {payload.get('course_title', 'your course')}."
                    ),
                ),
            ]

        if event_type == "enrollments.course.enrolled":
            course_title = payload.get("course_title", "your course")
            return [
                NotificationMessage(
                    user_id=self._required(payload, "student_id"),
                    title="Course unlocked",
                    body=f"You are now enrolled in {course_title}.",
                ),
            ]

        return []

    @staticmethod
    def _required(payload: dict, key: str) -> str:
        value = payload.get(key)
        if not value:
            raise ValueError(f"Outbox payload is missing {key}")
        return str(value)
