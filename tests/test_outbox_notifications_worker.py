from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from app.core.enums import NotificationStatusEnum, OutboxStatusEnum
from app.modules.notifications.outbox_worker import NotificationsOutboxWorker

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@dataclass
class FakeOutboxEvent:
    id: UUID
    event_type: str
    payload: dict
    status: OutboxStatusEnum = OutboxStatusEnum.PENDING
    retries: int = 0
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    processed_at: datetime | None = None
    error_message: str | None = None


@dataclass
class FakeNotification:
    id: UUID
    user_id: str
    channel: str
    title: str
    body: str
    status: NotificationStatusEnum = NotificationStatusEnum.PENDING
    sent_at: datetime | None = None


class FakeAuditRepository:
    def __init__(self, events: list[FakeOutboxEvent]) -> None:
        self.events = events

    async def list_pending_outbox(self, limit: int) -> list[FakeOutboxEvent]:
        return [event for event in self.events if event.status == OutboxStatusEnum.PENDING][:limit]

    async def list_failed_outbox(self, limit: int, max_retries: int) -> list[FakeOutboxEvent]:
        return [
            event
            for event in self.events
            if event.status == OutboxStatusEnum.FAILED and event.retries < max_retries
        ][:limit]

    async def mark_outbox_pending(self, event: FakeOutboxEvent) -> FakeOutboxEvent:
        event.status = OutboxStatusEnum.PENDING
        event.error_message = None
        return event

    async def mark_outbox_processed(
        self,
        event: FakeOutboxEvent,
        processed_at: datetime,
    ) -> FakeOutboxEvent:
        event.status = OutboxStatusEnum.PROCESSED
        event.processed_at = processed_at
        event.error_message = None
        event.updated_at = processed_at
        return event

    async def mark_outbox_failed(
        self,
        event: FakeOutboxEvent,
        error_message: str,
    ) -> FakeOutboxEvent:
        event.status = OutboxStatusEnum.FAILED
        event.retries += 1
        event.error_message = error_message
        return event


class FakeNotificationsRepository:
    def __init__(self) -> None:
        self.notifications: list[FakeNotification] = []

    async def create_notification(
        self,
        user_id: str,
        channel: str,
        title: str,
        body: str,
    ) -> FakeNotification:
        notification = FakeNotification(
            id=uuid4(),
            user_id=user_id,
            channel=channel,
            title=title,
            body=body,
        )
        self.notifications.append(notification)
        return notification

    async def set_status(
        self,
        notification: FakeNotification,
        status: NotificationStatusEnum,
        sent_at: datetime | None,
    ) -> FakeNotification:
        notification.status = status
        notification.sent_at = sent_at
        return notification


def make_worker(
    events: list[FakeOutboxEvent],
) -> tuple[NotificationsOutboxWorker, FakeNotificationsRepository]:
    notifications_repo = FakeNotificationsRepository()
    worker = NotificationsOutboxWorker(
        audit_repository=FakeAuditRepository(events),  # type: ignore[arg-type]
        notifications_repository=notifications_repo,  # type: ignore[arg-type]
        now_provider=lambda: NOW,
        base_backoff_seconds=30,
    )
    return worker, notifications_repo


def order_event(event_type: str, **overrides) -> FakeOutboxEvent:
    payload = {
        "order_id": str(uuid4()),
        "user_id": "u1",
        "course_id": "c2",
        "course_title": "System Design",
        "course_pricing": "499.00",
        "order_status": "pending",
        "payment_method": "paypal",
        "payment_status": "pending",
        **overrides,
    }
    return FakeOutboxEvent(id=uuid4(), event_type=event_type, payload=payload)


@pytest.mark.asyncio
async def test_pending_paid_order_asks_student_to_complete_payment() -> None:
    event = order_event("orders.order.created")
    worker, notifications_repo = make_worker([event])

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 1, "failed": 0, "dispatched": 1}
    assert event.status == OutboxStatusEnum.PROCESSED
    assert event.processed_at == NOW
    notification = notifications_repo.notifications[0]
    assert notification.user_id == "u1"
    assert notification.title == "Complete your payment"
    assert "System Design" in notification.body
    assert notification.status == NotificationStatusEnum.SENT
    assert notification.sent_at == NOW


@pytest.mark.asyncio
async def test_free_order_created_event_is_processed_without_notification() -> None:
    event = order_event(
        "orders.order.created",
        order_status="confirmed",
        payment_method="free",
        payment_status="paid",
        course_pricing="0.00",
    )
    worker, notifications_repo = make_worker([event])

    stats = await worker.run_once()

    assert stats["processed"] == 1
    assert stats["dispatched"] == 0
    assert notifications_repo.notifications == []


@pytest.mark.asyncio
async def test_confirmed_order_and_enrollment_notify_the_student() -> None:
    confirmed = order_event("orders.order.confirmed", order_status="confirmed", payment_status="paid")
    enrolled = FakeOutboxEvent(
        id=uuid4(),
        event_type="enrollments.course.enrolled",
        payload={
            "course_id": "c2",
            "course_title": "System Design",
            "student_id": "u1",
            "student_email": "asha@example.com",
        },
    )
    worker, notifications_repo = make_worker([confirmed, enrolled])

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 2, "failed": 0, "dispatched": 2}
    titles = [notification.title for notification in notifications_repo.notifications]
    assert titles == ["Payment received", "Course unlocked"]
    assert "499.00" in notifications_repo.notifications[0].body
    assert {n.user_id for n in notifications_repo.notifications} == {"u1"}


@pytest.mark.asyncio
async def test_unknown_event_is_processed_without_dispatch() -> None:
    event = FakeOutboxEvent(id=uuid4(), event_type="unknown.event", payload={})
    worker, notifications_repo = make_worker([event])

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 1, "failed": 0, "dispatched": 0}
    assert event.status == OutboxStatusEnum.PROCESSED
    assert notifications_repo.notifications == []


@pytest.mark.asyncio
async def test_event_without_recipient_is_marked_failed() -> None:
    event = FakeOutboxEvent(
        id=uuid4(),
        event_type="enrollments.course.enrolled",
        payload={"course_id": "c2"},
    )
    worker, notifications_repo = make_worker([event])

    stats = await worker.run_once()

    assert stats["failed"] == 1
    assert event.status == OutboxStatusEnum.FAILED
    assert event.retries == 1
    assert "student_id" in (event.error_message or "")
    assert notifications_repo.notifications == []


@pytest.mark.asyncio
async def test_failed_event_is_requeued_only_after_backoff() -> None:
    waiting = order_event("orders.order.confirmed")
    waiting.status = OutboxStatusEnum.FAILED
    waiting.retries = 2
    waiting.updated_at = NOW - timedelta(seconds=30)
    ready = order_event("orders.order.confirmed")
    ready.status = OutboxStatusEnum.FAILED
    ready.retries = 1
    ready.updated_at = NOW - timedelta(seconds=31)
    worker, notifications_repo = make_worker([waiting, ready])

    stats = await worker.run_once()

    assert stats["requeued"] == 1
    assert waiting.status == OutboxStatusEnum.FAILED
    assert ready.status == OutboxStatusEnum.PROCESSED
    assert len(notifications_repo.notifications) == 1


@pytest.mark.asyncio
async def test_exhausted_event_is_left_for_manual_inspection() -> None:
    event = order_event("orders.order.confirmed")
    event.status = OutboxStatusEnum.FAILED
    event.retries = 5
    event.updated_at = NOW - timedelta(days=1)
    worker, _ = make_worker([event])

    stats = await worker.run_once()

    assert stats == {"requeued": 0, "processed": 0, "failed": 0, "dispatched": 0}
    assert event.status == OutboxStatusEnum.FAILED
