"""Persistence for user and post search."""

from __future__ import annotations

from typing import List, Protocol, Set

from bubbly.domain.feed.models import Post
from bubbly.domain.feed.repo import POST_SELECT, VISIBLE_POST_FILTER, PostgresFeedRepository
from bubbly.domain.search.models import UserHit, like_pattern
from bubbly.infra.postgres import get_pool

def _user_match(param: str) -> str:
	return f"u.is_active AND (u.username ILIKE {param} OR u.full_name ILIKE {param})"


class SearchRepository(Protocol):
	async def following_ids(self, user_id: str) -> Set[str]: ...

	async def follower_ids(self, user_id: str) -> Set[str]: ...

	async def search_users(self, term: str, viewer_id: str, *, offset: int, limit: int) -> List[UserHit]: ...

	async def count_users(self, term: str) -> int: ...

	async def search_posts(self, term: str, viewer_id: str, *, offset: int, limit: int) -> List[Post]: ...

	async def count_posts(self, term: str, viewer_id: str) -> int: ...


class PostgresSearchRepository(PostgresFeedRepository):
	async def search_users(self, term: str, viewer_id: str, *, offset: int, limit: int) -> List[UserHit]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				SELECT u.id AS user_id,
					u.username AS user_username,
					u.full_name AS user_full_name,
					u.profile_picture AS user_profile_picture,
					u.is_verified AS user_is_verified,
					(SELECT COUNT(*) FROM followers f WHERE f.following_id = u.id) AS followers_count,
					(SELECT COUNT(*) FROM posts p WHERE p.author_id = u.id) AS posts_count,
					EXISTS (
						SELECT 1 FROM followers f WHERE f.follower_id = $1 AND f.following_id = u.id
					) AS is_following
				FROM users u
				WHERE {_user_match('$2')}
				ORDER BY u.is_verified DESC, u.created_at DESC
				OFFSET $3 LIMIT $4
				""",
				viewer_id,
				like_pattern(term),
				offset,
				limit,
			)
		return [UserHit.from_record(row) for row in rows]

	async def count_users(self, term: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					f"SELECT COUNT(*) FROM users u WHERE {_user_match('$1')}",
					like_pattern(term),
				)
			)

	async def search_posts(self, term: str, viewer_id: str, *, offset: int, limit: int) -> List[Post]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				{POST_SELECT}
				WHERE p.content ILIKE $2 AND {VISIBLE_POST_FILTER}
				ORDER BY p.created_at DESC
				OFFSET $3 LIMIT $4
				""",
				viewer_id,
				like_pattern(term),
				offset,
				limit,
			)
		return [Post.from_record(row) for row in rows]

	async def count_posts(self, term: str, viewer_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					f"SELECT COUNT(*) FROM posts p WHERE p.content ILIKE $2 AND {VISIBLE_POST_FILTER}",
					viewer_id,
					like_pattern(term),
				)
			)
