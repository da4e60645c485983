"""Persistence for posts and shares."""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence, Set

import asyncpg

from bubbly.domain.common.exceptions import Conflict
from bubbly.domain.feed.models import Audience, Post, Share
from bubbly.domain.feed.repo import POST_SELECT, SHARE_SELECT, PostgresFeedRepository
from bubbly.infra.postgres import get_pool


class PostRepository(Protocol):
	async def is_following(self, follower_id: str, following_id: str) -> bool: ...

	async def following_ids(self, user_id: str) -> Set[str]: ...

	async def follower_ids(self, user_id: str) -> Set[str]: ...

	async def get_post(self, post_id: str, viewer_id: str) -> Optional[Post]: ...

	async def create_post(
		self,
		*,
		author_id: str,
		content: Optional[str],
		files: Sequence[str],
		audience: Audience,
	) -> Post: ...

	async def update_post(
		self,
		post_id: str,
		*,
		content: Optional[str],
		files: Sequence[str],
		audience: Audience,
	) -> None: ...

	async def delete_post(self, post_id: str) -> None: ...

	async def list_posts_by_author(
		self,
		author_id: str,
		viewer_id: str,
		audiences: Iterable[Audience],
		*,
		offset: int,
		limit: int,
	) -> List[Post]: ...

	async def count_posts_by_author(self, author_id: str, audiences: Iterable[Audience]) -> int: ...

	async def get_share(self, share_id: str, viewer_id: str) -> Optional[Share]: ...

	async def get_share_by_user(self, post_id: str, user_id: str) -> Optional[Share]: ...

	async def create_share(
		self,
		*,
		post_id: str,
		user_id: str,
		caption: Optional[str],
		audience: Audience,
	) -> Share: ...

	async def update_share(self, share_id: str, *, caption: Optional[str], audience: Audience) -> None: ...

	async def delete_share(self, share_id: str) -> None: ...

	async def count_post_shares(self, post_id: str) -> int: ...

	async def list_post_shares(self, post_id: str, viewer_id: str, *, offset: int, limit: int) -> List[Share]: ...

	async def list_shares_by_user(
		self,
		user_id: str,
		viewer_id: str,
		audiences: Iterable[Audience],
		*,
		offset: int,
		limit: int,
	) -> List[Share]: ...

	async def count_shares_by_user(self, user_id: str, audiences: Iterable[Audience]) -> int: ...


def _audience_values(audiences: Iterable[Audience]) -> list[str]:
	return [Audience(audience).value for audience in audiences]


class PostgresPostRepository(PostgresFeedRepository):
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

	async def get_post(self, post_id: str, viewer_id: str) -> Optional[Post]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(f"{POST_SELECT} WHERE p.id = $2", viewer_id, post_id)
		return Post.from_record(row) if row else None

	async def create_post(
		self,
		*,
		author_id: str,
		content: Optional[str],
		files: Sequence[str],
		audience: Audience,
	) -> Post:
		pool = await get_pool()
		async with pool.acquire() as conn:
			post_id = await conn.fetchval(
				"""
				INSERT INTO posts (author_id, content, files, audience)
				VALUES ($1, $2, $3, $4)
				RETURNING id
				""",
				author_id,
				content,
				list(files),
				audience.value,
			)
			row = await conn.fetchrow(f"{POST_SELECT} WHERE p.id = $2", author_id, post_id)
		return Post.from_record(row)

	async def update_post(
		self,
		post_id: str,
		*,
		content: Optional[str],
		files: Sequence[str],
		audience: Audience,
	) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				"""
				UPDATE posts SET content = $2, files = $3, audience = $4, updated_at = NOW()
				WHERE id = $1
				""",
				post_id,
				content,
				list(files),
				audience.value,
			)

	async def delete_post(self, post_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			# shares, reactions, comments and notifications cascade
			await conn.execute("DELETE FROM posts WHERE id = $1", post_id)

	async def list_posts_by_author(
		self,
		author_id: str,
		viewer_id: str,
		audiences: Iterable[Audience],
		*,
		offset: int,
		limit: int,
	) -> List[Post]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				{POST_SELECT}
				WHERE p.author_id = $2 AND p.audience = ANY($3::text[])
				ORDER BY p.created_at DESC
				OFFSET $4 LIMIT $5
				""",
				viewer_id,
				author_id,
				_audience_values(audiences),
				offset,
				limit,
			)
		return [Post.from_record(row) for row in rows]

	async def count_posts_by_author(self, author_id: str, audiences: Iterable[Audience]) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					"SELECT COUNT(*) FROM posts WHERE author_id = $1 AND audience = ANY($2::text[])",
					author_id,
					_audience_values(audiences),
				)
			)

	async def get_share(self, share_id: str, viewer_id: str) -> Optional[Share]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(f"{SHARE_SELECT} WHERE s.id = $2", viewer_id, share_id)
		return Share.from_record(row) if row else None

	async def get_share_by_user(self, post_id: str, user_id: str) -> Optional[Share]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			row = await conn.fetchrow(
				f"{SHARE_SELECT} WHERE s.post_id = $2 AND s.user_id = $1",
				user_id,
				post_id,
			)
		return Share.from_record(row) if row else None

	async def create_share(
		self,
		*,
		post_id: str,
		user_id: str,
		caption: Optional[str],
		audience: Audience,
	) -> Share:
		pool = await get_pool()
		async with pool.acquire() as conn:
			try:
				share_id = await conn.fetchval(
					"""
					INSERT INTO shares (post_id, user_id, caption, audience)
					VALUES ($1, $2, $3, $4)
					RETURNING id
					""",
					post_id,
					user_id,
					caption,
					audience.value,
				)
			except asyncpg.UniqueViolationError:
				raise Conflict("You have already shared this post", reason="already_shared") from None
			row = await conn.fetchrow(f"{SHARE_SELECT} WHERE s.id = $2", user_id, share_id)
		return Share.from_record(row)

	async def update_share(self, share_id: str, *, caption: Optional[str], audience: Audience) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute(
				"UPDATE shares SET caption = $2, audience = $3, updated_at = NOW() WHERE id = $1",
				share_id,
				caption,
				audience.value,
			)

	async def delete_share(self, share_id: str) -> None:
		pool = await get_pool()
		async with pool.acquire() as conn:
			await conn.execute("DELETE FROM shares WHERE id = $1", share_id)

	async def count_post_shares(self, post_id: str) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(await conn.fetchval("SELECT COUNT(*) FROM shares WHERE post_id = $1", post_id))

	async def list_post_shares(self, post_id: str, viewer_id: str, *, offset: int, limit: int) -> List[Share]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"{SHARE_SELECT} WHERE s.post_id = $2 ORDER BY s.created_at DESC OFFSET $3 LIMIT $4",
				viewer_id,
				post_id,
				offset,
				limit,
			)
		return [Share.from_record(row) for row in rows]

	async def list_shares_by_user(
		self,
		user_id: str,
		viewer_id: str,
		audiences: Iterable[Audience],
		*,
		offset: int,
		limit: int,
	) -> List[Share]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"""
				{SHARE_SELECT}
				WHERE s.user_id = $2 AND s.audience = ANY($3::text[])
				ORDER BY s.created_at DESC
				OFFSET $4 LIMIT $5
				""",
				viewer_id,
				user_id,
				_audience_values(audiences),
				offset,
				limit,
			)
		return [Share.from_record(row) for row in rows]

	async def count_shares_by_user(self, user_id: str, audiences: Iterable[Audience]) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					"SELECT COUNT(*) FROM shares WHERE user_id = $1 AND audience = ANY($2::text[])",
					user_id,
					_audience_values(audiences),
				)
			)
