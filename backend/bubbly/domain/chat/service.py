"""Direct messaging between two users."""

from __future__ import annotations

import logging
from typing import List, Optional

from bubbly.domain.chat.models import Conversation, ConversationKey
from bubbly.domain.chat.repo import ChatRepository, PostgresChatRepository
from bubbly.domain.chat.schemas import ChatUserView, ConversationView, MessageView
from bubbly.domain.common.exceptions import NotFound, ValidationFailed
from bubbly.domain.common.paging import PageRequest, build_pagination
from bubbly.domain.common.schemas import PageResponse
from bubbly.domain.realtime import sockets
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


def _conversation_view(conversation: Conversation, viewer_id: str) -> ConversationView:
	other_id = conversation.other_id(viewer_id)
	other = conversation.other_user(viewer_id)
	return ConversationView(
		id=conversation.id,
		other_user=ChatUserView(
			id=other_id,
			username=other.username if other else None,
			full_name=other.full_name if other else None,
			profile_picture=other.profile_picture if other else None,
			is_verified=other.is_verified if other else False,
			is_online=sockets.is_online(other_id),
		),
		last_message=conversation.last_message,
		last_message_at=conversation.last_message_at,
		unread_count=conversation.unread_for(viewer_id),
	)


class ChatService:
	def __init__(self, repository: Optional[ChatRepository] = None) -> None:
		self._repo = repository or PostgresChatRepository()

	async def _participant_conversation(self, auth_user: AuthenticatedUser, conversation_id: str) -> Conversation:
		conversation = await self._repo.get(conversation_id)
		if conversation is None or not conversation.has_participant(auth_user.id):
			raise NotFound("Conversation not found", reason="conversation_not_found")
		return conversation

	async def get_or_create_conversation(self, auth_user: AuthenticatedUser, other_user_id: str) -> ConversationView:
		if other_user_id == auth_user.id:
			raise ValidationFailed("You cannot message yourself", reason="self_message")
		if await self._repo.get_user(other_user_id) is None:
			raise NotFound("User not found", reason="user_not_found")
		key = ConversationKey.from_participants(auth_user.id, other_user_id)
		conversation = await self._repo.get_or_create(key)
		return _conversation_view(conversation, auth_user.id)

	async def list_conversations(self, auth_user: AuthenticatedUser) -> List[ConversationView]:
		conversations = await self._repo.list_for(auth_user.id)
		return [_conversation_view(conversation, auth_user.id) for conversation in conversations]

	async def list_messages(
		self,
		auth_user: AuthenticatedUser,
		conversation_id: str,
		page: PageRequest,
	) -> PageResponse[MessageView]:
		"""One page of history, newest page first, oldest message first within the page."""
		conversation = await self._participant_conversation(auth_user, conversation_id)
		messages = await self._repo.list_messages(conversation.id, offset=page.offset, limit=page.limit)
		total = await self._repo.count_messages(conversation.id)
		return PageResponse[MessageView](
			data=[MessageView.from_message(message) for message in reversed(messages)],
			pagination=build_pagination(page, len(messages), total),
		)

	async def send_message(self, auth_user: AuthenticatedUser, conversation_id: str, content: Optional[str]) -> MessageView:
		text = (content or "").strip()
		if not text:
			raise ValidationFailed("Message content is required", reason="empty_message")
		conversation = await self._participant_conversation(auth_user, conversation_id)
		message = await self._repo.record_message(conversation, auth_user.id, text)
		obs_metrics.inc_message_sent()
		view = MessageView.from_message(message)
		# Clients also relay over the socket; receivers dedupe on message id.
		await sockets.emit_new_message(message.recipient_id, view.model_dump(mode="json", by_alias=True))
		return view

	async def mark_read(self, auth_user: AuthenticatedUser, conversation_id: str) -> int:
		conversation = await self._participant_conversation(auth_user, conversation_id)
		marked = await self._repo.mark_read(conversation, auth_user.id)
		await sockets.emit_messages_read(conversation.other_id(auth_user.id), conversation.id, auth_user.id)
		return marked

	async def delete_conversation(self, auth_user: AuthenticatedUser, conversation_id: str) -> None:
		conversation = await self._participant_conversation(auth_user, conversation_id)
		await self._repo.delete(conversation.id)
		logger.info("conversation deleted", extra={"conversation_id": conversation.id})

	async def unread_total(self, auth_user: AuthenticatedUser) -> int:
		return await self._repo.unread_total(auth_user.id)


_SERVICE = ChatService()


async def get_or_create_conversation(auth_user: AuthenticatedUser, other_user_id: str) -> ConversationView:
	return await _SERVICE.get_or_create_conversation(auth_user, other_user_id)


async def list_conversations(auth_user: AuthenticatedUser) -> List[ConversationView]:
	return await _SERVICE.list_conversations(auth_user)


async def list_messages(auth_user: AuthenticatedUser, conversation_id: str, page: PageRequest) -> PageResponse[MessageView]:
	return await _SERVICE.list_messages(auth_user, conversation_id, page)


async def send_message(auth_user: AuthenticatedUser, conversation_id: str, content: Optional[str]) -> MessageView:
	return await _SERVICE.send_message(auth_user, conversation_id, content)


async def mark_read(auth_user: AuthenticatedUser, conversation_id: str) -> int:
	return await _SERVICE.mark_read(auth_user, conversation_id)


async def delete_conversation(auth_user: AuthenticatedUser, conversation_id: str) -> None:
	await _SERVICE.delete_conversation(auth_user, conversation_id)


async def unread_total(auth_user: AuthenticatedUser) -> int:
	return await _SERVICE.unread_total(auth_user)
