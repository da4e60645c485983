"""Persistence for the follow graph."""

from __future__ import annotations

from typing import List, Optional, Protocol, Set, Tuple

import asyncpg

from bubbly.domain.common.exceptions import Conflict
from bubbly.domain.feed.models import AuthorSummary
from bubbly.domain.social.models import FollowCounts, FollowEdge
from bubbly.infra.postgres import get_pool

_USER_COLUMNS = """
	u.id AS user_id,
	u.username AS user_username,
	u.full_name AS user_full_name,
	u.profile_picture AS user_profile_picture,
	u.is_verified AS user_is_verified
"""


class FollowRepository(Protocol):
	async def get_user(self, user_id: str) -> Optional[AuthorSummary]: ...

	async def is_following(self, follower_id: str, following_id: str) -> bool: ...

	async def following_ids(self, user_id: str) -> Set[str]: ...

	async def create_follow(self, follower_id: str, following_id: str) -> None: ...

	async def delete_follow(self, follower_id: str, following_id: str) -> bool: ...

	async def list_followers(self, user_id: str, *, offset: int, limit: int) -> List[FollowEdge]: ...

	async def list_following(self, user_id: str, *, offset: int, limit: int) -> List[FollowEdge]: ...

	async def counts(self, user_id: str) -> FollowCounts: ...

	async def suggestions(self, user_id: str, *, limit: int) -> List[Tuple[AuthorSummary, int]]: ...


class PostgresFollowRepository:
	async def get_user(self, user_id: str) -> Optional[AuthorSummary]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				f"SELECT {_USER_COLUMNS} FROM users u WHERE u.id = $1 AND u.is_active",
				user_id,
			)
		return AuthorSummary.from_record(row, prefix="user_") if row else None

	async def is_following(self, follower_id: str, following_id: str) -> bool:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return bool(
				await conn.fetchval(
					"SELECT EXISTS (SELECT 1 FROM followers WHERE follower_id = $1 AND following_id = $2)",
					follower_id,
					following_id,
				)
			)

	async def following_ids(self, user_id: str) -> Set[str]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch("SELECT following_id FROM followers WHERE follower_id = $1", user_id)
		return {str(row["following_id"]) for row in rows}

	async def create_follow(self, follower_id: str, following_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			try:
				await conn.execute(
					"INSERT INTO followers (follower_id, following_id) VALUES ($1, $2)",
					follower_id,
					following_id,
				)
			except asyncpg.UniqueViolationError:
				raise Conflict("You are already following this user", reason="already_following") from None

	async def delete_follow(self, follower_id: str, following_id: str) -> bool:
		pool = await get_pool()
		async with pool.acquire() as conn:
			status = await conn.execute(
				"DELETE FROM followers WHERE follower_id = $1 AND following_id = $2",
				follower_id,
				following_id,
			)
		return status.endswith(" 1")

	async def list_followers(self, user_id: str, *, offset: int, limit: int) -> List[FollowEdge]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				SELECT {_USER_COLUMNS}, f.created_at AS followed_at
				FROM followers f
				JOIN users u ON u.id = f.follower_id
				WHERE f.following_id = $1
				ORDER BY f.created_at DESC
				OFFSET $2 LIMIT $3
				""",
				user_id,
				offset,
				limit,
			)
		return [FollowEdge.from_record(row) for row in rows]

	async def list_following(self, user_id: str, *, offset: int, limit: int) -> List[FollowEdge]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				SELECT {_USER_COLUMNS}, f.created_at AS followed_at
				FROM followers f
				JOIN users u ON u.id = f.following_id
				WHERE f.follower_id = $1
				ORDER BY f.created_at DESC
				OFFSET $2 LIMIT $3
				""",
				user_id,
				offset,
				limit,
			)
		return [FollowEdge.from_record(row) for row in rows]

	async def counts(self, user_id: str) -> FollowCounts:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				"""
				SELECT
					(SELECT COUNT(*) FROM followers WHERE following_id = $1) AS followers,
					(SELECT COUNT(*) FROM followers WHERE follower_id = $1) AS following
				""",
				user_id,
			)
		return FollowCounts(followers=int(row["followers"]), following=int(row["following"]))

	async def suggestions(self, user_id: str, *, limit: int) -> List[Tuple[AuthorSummary, int]]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				SELECT {_USER_COLUMNS},
					(SELECT COUNT(*) FROM followers f2 WHERE f2.following_id = u.id) AS followers_count
				FROM users u
				WHERE u.id <> $1
					AND u.is_active
					AND NOT EXISTS (
						SELECT 1 FROM followers f WHERE f.follower_id = $1 AND f.following_id = u.id
					)
				ORDER BY u.is_verified DESC, followers_count DESC, u.created_at DESC
				LIMIT $2
				""",
				user_id,
				limit,
			)
		return [(AuthorSummary.from_record(row, prefix="user_"), int(row["followers_count"])) for row in rows]
