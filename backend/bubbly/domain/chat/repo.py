"""Persistence for conversations and direct messages."""

from __future__ import annotations

from typing import List, Optional, Protocol

from bubbly.domain.chat.models import LAST_MESSAGE_PREVIEW_LENGTH, Conversation, ConversationKey, Message
from bubbly.domain.feed.models import AuthorSummary
from bubbly.infra.postgres import get_pool

_CONVERSATION_SELECT = """
	SELECT c.id, c.user1_id, c.user2_id, c.last_message, c.last_message_at,
		c.user1_unread, c.user2_unread, c.created_at,
		u1.id AS u1_id, u1.username AS u1_username, u1.full_name AS u1_full_name,
		u1.profile_picture AS u1_profile_picture, u1.is_verified AS u1_is_verified,
		u2.id AS u2_id, u2.username AS u2_username, u2.full_name AS u2_full_name,
		u2.profile_picture AS u2_profile_picture, u2.is_verified AS u2_is_verified
	FROM conversations c
	JOIN users u1 ON u1.id = c.user1_id
	JOIN users u2 ON u2.id = c.user2_id
"""

_MESSAGE_SELECT = """
	SELECT m.id, m.conversation_id, m.sender_id, m.recipient_id, m.content, m.is_read, m.created_at,
		u.username AS sender_username,
		u.full_name AS sender_full_name,
		u.profile_picture AS sender_profile_picture,
		u.is_verified AS sender_is_verified
	FROM messages m
	JOIN users u ON u.id = m.sender_id
"""


class ChatRepository(Protocol):
	async def get_user(self, user_id: str) -> Optional[AuthorSummary]: ...

	async def get_or_create(self, key: ConversationKey) -> Conversation: ...

	async def get(self, conversation_id: str) -> Optional[Conversation]: ...

	async def list_for(self, user_id: str) -> List[Conversation]: ...

	async def list_messages(self, conversation_id: str, *, offset: int, limit: int) -> List[Message]: ...

	async def count_messages(self, conversation_id: str) -> int: ...

	async def record_message(self, conversation: Conversation, sender_id: str, content: str) -> Message: ...

	async def mark_read(self, conversation: Conversation, reader_id: str) -> int: ...

	async def delete(self, conversation_id: str) -> None: ...

	async def unread_total(self, user_id: str) -> int: ...


class PostgresChatRepository:
	async def get_user(self, user_id: str) -> Optional[AuthorSummary]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				"SELECT id, username, full_name, profile_picture, is_verified FROM users WHERE id = $1",
				user_id,
			)
		return AuthorSummary.from_record(row) if row else None

	async def get_or_create(self, key: ConversationKey) -> Conversation:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				INSERT INTO conversations (user1_id, user2_id)
				VALUES ($1, $2)
				ON CONFLICT (user1_id, user2_id) DO NOTHING
				""",
				key.user1_id,
				key.user2_id,
			)
			row = await conn.fetchrow(
				f"{_CONVERSATION_SELECT} WHERE c.user1_id = $1 AND c.user2_id = $2",
				key.user1_id,
				key.user2_id,
			)
		return Conversation.from_record(row)

	async def get(self, conversation_id: str) -> Optional[Conversation]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(f"{_CONVERSATION_SELECT} WHERE c.id = $1", conversation_id)
		return Conversation.from_record(row) if row else None

	async def list_for(self, user_id: str) -> List[Conversation]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				{_CONVERSATION_SELECT}
				WHERE c.user1_id = $1 OR c.user2_id = $1
				ORDER BY c.last_message_at DESC NULLS LAST, c.created_at DESC
				""",
				user_id,
			)
		return [Conversation.from_record(row) for row in rows]

	async def list_messages(self, conversation_id: str, *, offset: int, limit: int) -> List[Message]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"{_MESSAGE_SELECT} WHERE m.conversation_id = $1 ORDER BY m.created_at DESC OFFSET $2 LIMIT $3",
				conversation_id,
				offset,
				limit,
			)
		return [Message.from_record(row) for row in rows]

	async def count_messages(self, conversation_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(await conn.fetchval("SELECT COUNT(*) FROM messages WHERE conversation_id = $1", conversation_id))

	async def record_message(self, conversation: Conversation, sender_id: str, content: str) -> Message:
		recipient_id = conversation.other_id(sender_id)
		unread_column = "user1_unread" if recipient_id == conversation.key.user1_id else "user2_unread"
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				message_id = await conn.fetchval(
					"""
					INSERT INTO messages (conversation_id, sender_id, recipient_id, content)
					VALUES ($1, $2, $3, $4)
					RETURNING id
					""",
					conversation.id,
					sender_id,
					recipient_id,
					content,
				)
				await conn.execute(
					f"""
					UPDATE conversations
					SET last_message = $2, last_message_at = NOW(), {unread_column} = {unread_column} + 1
					WHERE id = $1
					""",
					conversation.id,
					content[:LAST_MESSAGE_PREVIEW_LENGTH],
				)
				row = await conn.fetchrow(f"{_MESSAGE_SELECT} WHERE m.id = $1", message_id)
		return Message.from_record(row)

	async def mark_read(self, conversation: Conversation, reader_id: str) -> int:
		unread_column = "user1_unread" if reader_id == conversation.key.user1_id else "user2_unread"
		pool = await get_pool()
		async with pool.acquire() as conn:
			async with conn.transaction():
				status = await conn.execute(
					"""
					UPDATE messages SET is_read = TRUE
					WHERE conversation_id = $1 AND recipient_id = $2 AND NOT is_read
					""",
					conversation.id,
					reader_id,
				)
				await conn.execute(
					f"UPDATE conversations SET {unread_column} = 0 WHERE id = $1",
					conversation.id,
				)
		try:
			return int(status.rsplit(" ", 1)[-1])
		except ValueError:
			return 0

	async def delete(self, conversation_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			# messages cascade
			await conn.execute("DELETE FROM conversations WHERE id = $1", conversation_id)

	async def unread_total(self, user_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					"""
					SELECT COALESCE(SUM(CASE WHEN user1_id = $1 THEN user1_unread ELSE user2_unread END), 0)
					FROM conversations
					WHERE user1_id = $1 OR user2_id = $1
					""",
					user_id,
				)
			)
