"""Persistence for post and share reactions."""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from bubbly.domain.feed.models import Post
from bubbly.domain.feed.repo import POST_SELECT, VISIBLE_POST_FILTER
from bubbly.domain.reactions.models import Reaction, ReactionSubject, ReactionType
from bubbly.infra.postgres import get_pool

_TABLES = {
	ReactionSubject.POST: ("reactions", "post_id"),
	ReactionSubject.SHARE: ("share_reactions", "share_id"),
}


def reaction_table(subject: ReactionSubject) -> tuple[str, str]:
	return _TABLES[ReactionSubject(subject)]


class ReactionRepository(Protocol):
	async def get_reaction(self, subject: ReactionSubject, subject_id: str, user_id: str) -> Optional[ReactionType]: ...

	async def set_reaction(
		self,
		subject: ReactionSubject,
		subject_id: str,
		user_id: str,
		reaction_type: ReactionType,
	) -> None: ...

	async def delete_reaction(self, subject: ReactionSubject, subject_id: str, user_id: str) -> bool: ...

	async def reaction_counts(self, subject: ReactionSubject, subject_id: str) -> Dict[str, int]: ...

	async def list_reactions(
		self,
		subject: ReactionSubject,
		subject_id: str,
		*,
		reaction_type: Optional[ReactionType],
		offset: int,
		limit: int,
	) -> List[Reaction]: ...

	async def count_reactions(
		self,
		subject: ReactionSubject,
		subject_id: str,
		*,
		reaction_type: Optional[ReactionType] = None,
	) -> int: ...

	async def list_reacted_posts(self, user_id: str, viewer_id: str, *, offset: int, limit: int) -> List[Post]: ...

	async def count_reacted_posts(self, user_id: str, viewer_id: str) -> int: ...


class PostgresReactionRepository:
	async def get_reaction(self, subject: ReactionSubject, subject_id: str, user_id: str) -> Optional[ReactionType]:
		table, column = reaction_table(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			value = await conn.fetchval(
				f"SELECT reaction_type FROM {table} WHERE {column} = $1 AND user_id = $2",
				subject_id,
				user_id,
			)
		return ReactionType(value) if value else None

	async def set_reaction(
		self,
		subject: ReactionSubject,
		subject_id: str,
		user_id: str,
		reaction_type: ReactionType,
	) -> None:
		table, column = reaction_table(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				f"""
				INSERT INTO {table} ({column}, user_id, reaction_type)
				VALUES ($1, $2, $3)
				ON CONFLICT ({column}, user_id)
				DO UPDATE SET reaction_type = EXCLUDED.reaction_type, updated_at = NOW()
				""",
				subject_id,
				user_id,
				reaction_type.value,
			)

	async def delete_reaction(self, subject: ReactionSubject, subject_id: str, user_id: str) -> bool:
		table, column = reaction_table(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			status = await conn.execute(
				f"DELETE FROM {table} WHERE {column} = $1 AND user_id = $2",
				subject_id,
				user_id,
			)
		return status.endswith(" 1")

	async def reaction_counts(self, subject: ReactionSubject, subject_id: str) -> Dict[str, int]:
		table, column = reaction_table(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"SELECT reaction_type, COUNT(*) AS total FROM {table} WHERE {column} = $1 GROUP BY reaction_type",
				subject_id,
			)
		return {row["reaction_type"]: int(row["total"]) for row in rows}

	async def list_reactions(
		self,
		subject: ReactionSubject,
		subject_id: str,
		*,
		reaction_type: Optional[ReactionType],
		offset: int,
		limit: int,
	) -> List[Reaction]:
		table, column = reaction_table(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				SELECT r.{column} AS subject_id, r.user_id, r.reaction_type, r.created_at,
					u.username AS user_username,
					u.full_name AS user_full_name,
					u.profile_picture AS user_profile_picture,
					u.is_verified AS user_is_verified
				FROM {table} r
				JOIN users u ON u.id = r.user_id
				WHERE r.{column} = $1 AND ($2::text IS NULL OR r.reaction_type = $2)
				ORDER BY r.created_at DESC
				OFFSET $3 LIMIT $4
				""",
				subject_id,
				reaction_type.value if reaction_type else None,
				offset,
				limit,
			)
		return [Reaction.from_record(row) for row in rows]

	async def count_reactions(
		self,
		subject: ReactionSubject,
		subject_id: str,
		*,
		reaction_type: Optional[ReactionType] = None,
	) -> int:
		table, column = reaction_table(subject)
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					f"SELECT COUNT(*) FROM {table} WHERE {column} = $1 AND ($2::text IS NULL OR reaction_type = $2)",
					subject_id,
					reaction_type.value if reaction_type else None,
				)
			)

	async def list_reacted_posts(self, user_id: str, viewer_id: str, *, offset: int, limit: int) -> List[Post]:
		"""Posts ``user_id`` reacted to, newest reaction first, limited to what the viewer may see."""
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				{POST_SELECT}
				JOIN reactions ur ON ur.post_id = p.id AND ur.user_id = $2
				WHERE {VISIBLE_POST_FILTER}
				ORDER BY ur.created_at DESC
				OFFSET $3 LIMIT $4
				""",
				viewer_id,
				user_id,
				offset,
				limit,
			)
		return [Post.from_record(row) for row in rows]

	async def count_reacted_posts(self, user_id: str, viewer_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					f"""
					SELECT COUNT(*)
					FROM reactions ur
					JOIN posts p ON p.id = ur.post_id
					WHERE ur.user_id = $2 AND {VISIBLE_POST_FILTER}
					""",
					viewer_id,
					user_id,
				)
			)
