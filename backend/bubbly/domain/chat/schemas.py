"""Pydantic schemas for conversations and messages."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bubbly.domain.chat.models import Message
from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.schemas import UserSummaryView


class SendMessageRequest(CamelModel):
	content: str


class ChatUserView(UserSummaryView):
	is_online: bool = False


class ConversationView(CamelModel):
	id: str
	other_user: ChatUserView
	last_message: Optional[str] = None
	last_message_at: Optional[datetime] = None
	unread_count: int = 0


class MessageView(CamelModel):
	id: str
	conversation_id: str
	sender: UserSummaryView
	recipient: str
	content: str
	is_read: bool = False
	created_at: datetime

	@classmethod
	def from_message(cls, message: Message) -> "MessageView":
		return cls(
			id=message.id,
			conversation_id=message.conversation_id,
			sender=UserSummaryView.from_summary(message.sender, message.sender_id),
			recipient=message.recipient_id,
			content=message.content,
			is_read=message.is_read,
			created_at=message.created_at,
		)


class MarkReadResult(CamelModel):
	success: bool = True
	marked: int


class UnreadTotalResponse(CamelModel):
	success: bool = True
	unread_count: int
