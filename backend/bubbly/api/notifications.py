"""Notification inbox endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from bubbly.api.pagination import page_params
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import DataResponse, MessageResponse
from bubbly.domain.notifications import service
from bubbly.domain.notifications.schemas import NotificationListResponse, NotificationView, UnreadCountResponse
from bubbly.infra.auth import AuthenticatedUser, get_current_user
from bubbly.settings import settings

router = APIRouter(prefix="/api/notifications")


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
	page: PageRequest = Depends(page_params(default_limit=settings.notifications_default_limit)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> NotificationListResponse:
	return await service.list_notifications(auth_user, page)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> UnreadCountResponse:
	return UnreadCountResponse(unread_count=await service.unread_count(auth_user))


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_read(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
	updated = await service.mark_all_read(auth_user)
	return MessageResponse(message=f"{updated} notifications marked as read")


@router.put("/{notification_id}/read", response_model=DataResponse[NotificationView])
async def mark_read(
	notification_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[NotificationView]:
	return DataResponse[NotificationView](data=await service.mark_read(auth_user, str(notification_id)))


@router.delete("", response_model=MessageResponse)
async def delete_all(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
	removed = await service.delete_all(auth_user)
	return MessageResponse(message=f"{removed} notifications deleted")


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
	notification_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
	await service.delete_notification(auth_user, str(notification_id))
	return MessageResponse(message="Notification deleted successfully")
