"""Notifications API schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict

from app.core.enums import NotificationStatusEnum
from app.shared.schemas import CamelModel


class NotificationRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    channel: str
    title: str
    body: str
    status: NotificationStatusEnum
    sent_at: datetime | None
    created_at: datetime
