"""Persistence for notifications."""

from __future__ import annotations

from typing import List, Optional, Protocol

from bubbly.domain.notifications.models import Notification, NotificationType
from bubbly.infra.postgres import get_pool

_SELECT = """
	SELECT n.id, n.recipient_id, n.sender_id, n.type, n.post_id, n.share_id, n.content,
		n.reaction_type, n.is_read, n.created_at,
		u.username AS sender_username,
		u.full_name AS sender_full_name,
		u.profile_picture AS sender_profile_picture,
		u.is_verified AS sender_is_verified
	FROM notifications n
	JOIN users u ON u.id = n.sender_id
"""


class NotificationRepository(Protocol):
	async def create(
		self,
		*,
		recipient_id: str,
		sender_id: str,
		kind: NotificationType,
		content: str,
		post_id: Optional[str] = None,
		share_id: Optional[str] = None,
		reaction_type: Optional[str] = None,
	) -> Notification: ...

	async def get(self, notification_id: str) -> Optional[Notification]: ...

	async def list_for(self, recipient_id: str, *, offset: int, limit: int) -> List[Notification]: ...

	async def count_for(self, recipient_id: str) -> int: ...

	async def count_unread(self, recipient_id: str) -> int: ...

	async def mark_read(self, notification_id: str) -> None: ...

	async def mark_all_read(self, recipient_id: str) -> int: ...

	async def delete(self, notification_id: str) -> None: ...

	async def delete_all(self, recipient_id: str) -> int: ...


def _affected(status: str) -> int:
	# asyncpg returns command tags such as "UPDATE 3" / "DELETE 0".
	try:
		return int(status.rsplit(" ", 1)[-1])
	except (AttributeError, ValueError):
		return 0


class PostgresNotificationRepository:
	async def create(
		self,
		*,
		recipient_id: str,
		sender_id: str,
		kind: NotificationType,
		content: str,
		post_id: Optional[str] = None,
		share_id: Optional[str] = None,
		reaction_type: Optional[str] = None,
	) -> Notification:
		pool = await get_pool()
		async with pool.acquire() as conn:
			notification_id = await conn.fetchval(
				"""
				INSERT INTO notifications (recipient_id, sender_id, type, post_id, share_id, content, reaction_type)
				VALUES ($1, $2, $3, $4, $5, $6, $7)
				RETURNING id
				""",
				recipient_id,
				sender_id,
				kind.value,
				post_id,
				share_id,
				content,
				reaction_type,
			)
			row = await conn.fetchrow(f"{_SELECT} WHERE n.id = $1", notification_id)
		return Notification.from_record(row)

	async def get(self, notification_id: str) -> Optional[Notification]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(f"{_SELECT} WHERE n.id = $1", notification_id)
		return Notification.from_record(row) if row else None

	async def list_for(self, recipient_id: str, *, offset: int, limit: int) -> List[Notification]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"{_SELECT} WHERE n.recipient_id = $1 ORDER BY n.created_at DESC OFFSET $2 LIMIT $3",
				recipient_id,
				offset,
				limit,
			)
		return [Notification.from_record(row) for row in rows]

	async def count_for(self, recipient_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(await conn.fetchval("SELECT COUNT(*) FROM notifications WHERE recipient_id = $1", recipient_id))

	async def count_unread(self, recipient_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					"SELECT COUNT(*) FROM notifications WHERE recipient_id = $1 AND NOT is_read",
					recipient_id,
				)
			)

	async def mark_read(self, notification_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute("UPDATE notifications SET is_read = TRUE WHERE id = $1", notification_id)

	async def mark_all_read(self, recipient_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			status = await conn.execute(
				"UPDATE notifications SET is_read = TRUE WHERE recipient_id = $1 AND NOT is_read",
				recipient_id,
			)
		return _affected(status)

	async def delete(self, notification_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute("DELETE FROM notifications WHERE id = $1", notification_id)

	async def delete_all(self, recipient_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			status = await conn.execute("DELETE FROM notifications WHERE recipient_id = $1", recipient_id)
		return _affected(status)
