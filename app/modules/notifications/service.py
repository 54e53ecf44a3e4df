"""Notifications business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.notifications.models import Notification
from app.modules.notifications.repository import NotificationsRepository


class NotificationsService:
    """Read access to a student's notification feed."""

    def __init__(self, repository: NotificationsRepository) -> None:
        self.repository = repository

    async def list_for_user(
        self,
        user_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[Notification], int]:
        return await self.repository.list_notifications_for_user(user_id, limit=limit, offset=offset)


async def get_notifications_service(
    session: AsyncSession = Depends(get_db_session),
) -> NotificationsService:
    """Dependency provider for notifications service."""
    return NotificationsService(NotificationsRepository(session))
