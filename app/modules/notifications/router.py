"""Notifications API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.notifications.schemas import NotificationRead
from app.modules.notifications.service import NotificationsService, get_notifications_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/{user_id}", response_model=Page[NotificationRead])
async def list_user_notifications(
    user_id: str,
    pagination=Depends(get_pagination_params),
    service: NotificationsService = Depends(get_notifications_service),
) -> Page[NotificationRead]:
    """List notifications produced for a student, newest first."""
    items, total = await service.list_for_user(
        user_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    serialized = [NotificationRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
