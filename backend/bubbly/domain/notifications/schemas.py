"""Pydantic schemas for notifications."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from bubbly.domain.common.schemas import CamelModel, Pagination
from bubbly.domain.feed.schemas import UserSummaryView
from bubbly.domain.notifications.models import Notification, NotificationType


class NotificationView(CamelModel):
	id: str
	recipient: str
	sender: UserSummaryView
	type: NotificationType
	post: Optional[str] = None
	share: Optional[str] = None
	content: str
	reaction_type: Optional[str] = None
	is_read: bool = False
	created_at: datetime

	@classmethod
	def from_notification(cls, notification: Notification) -> "NotificationView":
		return cls(
			id=notification.id,
			recipient=notification.recipient_id,
			sender=UserSummaryView.from_summary(notification.sender, notification.sender_id),
			type=notification.type,
			post=notification.post_id,
			share=notification.share_id,
			content=notification.content,
			reaction_type=notification.reaction_type,
			is_read=notification.is_read,
			created_at=notification.created_at,
		)


class NotificationListResponse(CamelModel):
	success: bool = True
	data: List[NotificationView]
	pagination: Pagination
	unread_count: int


class UnreadCountResponse(CamelModel):
	success: bool = True
	unread_count: int
