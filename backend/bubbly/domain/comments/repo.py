"""Persistence for comments on posts and shares."""

from __future__ import annotations

from typing import List, Optional, Protocol

from bubbly.domain.comments.models import Comment
from bubbly.domain.reactions.models import ReactionSubject
from bubbly.infra.postgres import get_pool

_SELECT = """
	SELECT c.id, c.user_id, c.post_id, c.share_id, c.content, c.created_at, c.updated_at,
		u.username AS user_username,
		u.full_name AS user_full_name,
		u.profile_picture AS user_profile_picture,
		u.is_verified AS user_is_verified
	FROM comments c
	JOIN users u ON u.id = c.user_id
"""


def _column(subject: ReactionSubject) -> str:
	return "post_id" if ReactionSubject(subject) is ReactionSubject.POST else "share_id"


class CommentRepository(Protocol):
	async def create(self, subject: ReactionSubject, subject_id: str, user_id: str, content: str) -> Comment: ...

	async def get(self, comment_id: str) -> Optional[Comment]: ...

	async def list_for(self, subject: ReactionSubject, subject_id: str, *, offset: int, limit: int) -> List[Comment]: ...

	async def count_for(self, subject: ReactionSubject, subject_id: str) -> int: ...

	async def update(self, comment_id: str, content: str) -> None: ...

	async def delete(self, comment_id: str) -> None: ...


class PostgresCommentRepository:
	async def create(self, subject: ReactionSubject, subject_id: str, user_id: str, content: str) -> Comment:
		column = _column(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			comment_id = await conn.fetchval(
				f"INSERT INTO comments ({column}, user_id, content) VALUES ($1, $2, $3) RETURNING id",
				subject_id,
				user_id,
				content,
			)
			row = await conn.fetchrow(f"{_SELECT} WHERE c.id = $1", comment_id)
		return Comment.from_record(row)

	async def get(self, comment_id: str) -> Optional[Comment]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(f"{_SELECT} WHERE c.id = $1", comment_id)
		return Comment.from_record(row) if row else None

	async def list_for(self, subject: ReactionSubject, subject_id: str, *, offset: int, limit: int) -> List[Comment]:
		column = _column(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"{_SELECT} WHERE c.{column} = $1 ORDER BY c.created_at DESC OFFSET $2 LIMIT $3",
				subject_id,
				offset,
				limit,
			)
		return [Comment.from_record(row) for row in rows]

	async def count_for(self, subject: ReactionSubject, subject_id: str) -> int:
		column = _column(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(await conn.fetchval(f"SELECT COUNT(*) FROM comments WHERE {column} = $1", subject_id))

	async def update(self, comment_id: str, content: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				"UPDATE comments SET content = $2, updated_at = NOW() WHERE id = $1",
				comment_id,
				content,
			)

	async def delete(self, comment_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute("DELETE FROM comments WHERE id = $1", comment_id)
