"""Notification creation and inbox management."""

from __future__ import annotations

import logging
from typing import Optional

from bubbly.domain.common.exceptions import Forbidden, NotFound
from bubbly.domain.common.paging import PageRequest, build_pagination
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.notifications.repo import NotificationRepository, PostgresNotificationRepository
from bubbly.domain.notifications.schemas import NotificationListResponse, NotificationView
from bubbly.domain.realtime import sockets
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class NotificationService:
	def __init__(self, repository: Optional[NotificationRepository] = None) -> None:
		self._repo = repository or PostgresNotificationRepository()

	async def create_notification(
		self,
		*,
		recipient_id: str,
		sender_id: str,
		kind: NotificationType,
		content: str,
		post_id: Optional[str] = None,
		share_id: Optional[str] = None,
		reaction_type: Optional[str] = None,
	) -> Optional[NotificationView]:
		"""Persist and push a notification.

		Returns None when the sender is the recipient or when persistence fails;
		a failed notification never fails the action that triggered it.
		"""
		if str(recipient_id) == str(sender_id):
			obs_metrics.inc_notification(kind.value, "self")
			return None
		try:
			notification = await self._repo.create(
				recipient_id=recipient_id,
				sender_id=sender_id,
				kind=kind,
				content=content,
				post_id=post_id,
				share_id=share_id,
				reaction_type=reaction_type,
			)
		except Exception:
			obs_metrics.inc_notification(kind.value, "error")
			logger.warning(
				"notification create failed type=%s recipient=%s",
				kind.value,
				recipient_id,
				exc_info=True,
			)
			return None
		obs_metrics.inc_notification(kind.value, "created")
		view = NotificationView.from_notification(notification)
		await sockets.emit_new_notification(recipient_id, view.model_dump(mode="json", by_alias=True))
		return view

	async def list_notifications(self, auth_user: AuthenticatedUser, page: PageRequest) -> NotificationListResponse:
		items = await self._repo.list_for(auth_user.id, offset=page.offset, limit=page.limit)
		total = await self._repo.count_for(auth_user.id)
		unread = await self._repo.count_unread(auth_user.id)
		return NotificationListResponse(
			data=[NotificationView.from_notification(item) for item in items],
			pagination=build_pagination(page, len(items), total),
			unread_count=unread,
		)

	async def unread_count(self, auth_user: AuthenticatedUser) -> int:
		return await self._repo.count_unread(auth_user.id)

	async def mark_read(self, auth_user: AuthenticatedUser, notification_id: str) -> NotificationView:
		notification = await self._owned(auth_user, notification_id)
		if not notification.is_read:
			await self._repo.mark_read(notification_id)
			notification.is_read = True
		return NotificationView.from_notification(notification)

	async def mark_all_read(self, auth_user: AuthenticatedUser) -> int:
		return await self._repo.mark_all_read(auth_user.id)

	async def delete_notification(self, auth_user: AuthenticatedUser, notification_id: str) -> None:
		await self._owned(auth_user, notification_id)
		await self._repo.delete(notification_id)

	async def delete_all(self, auth_user: AuthenticatedUser) -> int:
		return await self._repo.delete_all(auth_user.id)

	async def _owned(self, auth_user: AuthenticatedUser, notification_id: str):
		notification = await self._repo.get(notification_id)
		if notification is None:
			raise NotFound("Notification not found", reason="notification_not_found")
		if notification.recipient_id != auth_user.id:
			raise Forbidden("Not authorized to access this notification", reason="not_owner")
		return notification


_SERVICE = NotificationService()


def get_service() -> NotificationService:
	return _SERVICE


async def create_notification(**kwargs) -> Optional[NotificationView]:
	return await _SERVICE.create_notification(**kwargs)


async def list_notifications(auth_user: AuthenticatedUser, page: PageRequest) -> NotificationListResponse:
	return await _SERVICE.list_notifications(auth_user, page)


async def unread_count(auth_user: AuthenticatedUser) -> int:
	return await _SERVICE.unread_count(auth_user)


async def mark_read(auth_user: AuthenticatedUser, notification_id: str) -> NotificationView:
	return await _SERVICE.mark_read(auth_user, notification_id)


async def mark_all_read(auth_user: AuthenticatedUser) -> int:
	return await _SERVICE.mark_all_read(auth_user)


async def delete_notification(auth_user: AuthenticatedUser, notification_id: str) -> None:
	await _SERVICE.delete_notification(auth_user, notification_id)


async def delete_all(auth_user: AuthenticatedUser) -> int:
	return await _SERVICE.delete_all(auth_user)
