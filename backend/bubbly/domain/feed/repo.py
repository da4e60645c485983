"""Persistence for feed reads."""

from __future__ import annotations

from typing import Iterable, List, Protocol, Set

from bubbly.domain.feed.models import Post, Share
from bubbly.infra.postgres import get_pool

# $1 is always the viewer id so the viewer's own reaction comes back with the row.
POST_SELECT = """
	SELECT p.id, p.author_id, p.content, p.files, p.audience, p.created_at, p.updated_at,
		u.username AS author_username,
		u.full_name AS author_full_name,
		u.profile_picture AS author_profile_picture,
		u.is_verified AS author_is_verified,
		(SELECT COUNT(*) FROM reactions r WHERE r.post_id = p.id) AS reaction_count,
		(SELECT COUNT(*) FROM comments c WHERE c.post_id = p.id) AS comment_count,
		(SELECT COUNT(*) FROM shares s WHERE s.post_id = p.id) AS share_count,
		(SELECT r.reaction_type FROM reactions r WHERE r.post_id = p.id AND r.user_id = $1) AS viewer_reaction
	FROM posts p
	JOIN users u ON u.id = p.author_id
"""

# Posts ``p`` the viewer ($1) may see; the same rule as ``visibility.can_view_post``.
VISIBLE_POST_FILTER = """
	(p.author_id = $1
		OR p.audience = 'Public'
		OR (p.audience = 'Following' AND EXISTS (
			SELECT 1 FROM followers vf WHERE vf.follower_id = p.author_id AND vf.following_id = $1
		)))
"""

SHARE_SELECT = """
	SELECT s.id, s.user_id AS sharer_id, s.post_id, s.caption, s.audience, s.created_at, s.updated_at,
		su.username AS sharer_username,
		su.full_name AS sharer_full_name,
		su.profile_picture AS sharer_profile_picture,
		su.is_verified AS sharer_is_verified,
		(SELECT COUNT(*) FROM share_reactions sr WHERE sr.share_id = s.id) AS reaction_count,
		(SELECT COUNT(*) FROM comments c WHERE c.share_id = s.id) AS comment_count,
		(SELECT sr.reaction_type FROM share_reactions sr WHERE sr.share_id = s.id AND sr.user_id = $1) AS viewer_reaction,
		p.id AS p_id, p.author_id AS p_author_id, p.content AS p_content, p.files AS p_files,
		p.audience AS p_audience, p.created_at AS p_created_at, p.updated_at AS p_updated_at,
		pu.username AS p_author_username,
		pu.full_name AS p_author_full_name,
		pu.profile_picture AS p_author_profile_picture,
		pu.is_verified AS p_author_is_verified,
		(SELECT COUNT(*) FROM reactions r WHERE r.post_id = p.id) AS p_reaction_count,
		(SELECT COUNT(*) FROM comments c WHERE c.post_id = p.id) AS p_comment_count,
		(SELECT COUNT(*) FROM shares s2 WHERE s2.post_id = p.id) AS p_share_count,
		(SELECT r.reaction_type FROM reactions r WHERE r.post_id = p.id AND r.user_id = $1) AS p_viewer_reaction
	FROM shares s
	JOIN users su ON su.id = s.user_id
	LEFT JOIN posts p ON p.id = s.post_id
	LEFT JOIN users pu ON pu.id = p.author_id
"""


class FeedRepository(Protocol):
	async def following_ids(self, user_id: str) -> Set[str]: ...

	async def follower_ids(self, user_id: str) -> Set[str]: ...

	async def recent_posts(self, viewer_id: str, *, limit: int) -> List[Post]: ...

	async def recent_shares(self, viewer_id: str, sharer_ids: Iterable[str], *, limit: int) -> List[Share]: ...

	async def count_posts(self) -> int: ...

	async def count_shares(self, sharer_ids: Iterable[str]) -> int: ...


class PostgresFeedRepository:
	async def following_ids(self, user_id: str) -> Set[str]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"SELECT following_id FROM followers WHERE follower_id = $1",
				user_id,
			)
		return {str(row["following_id"]) for row in rows}

	async def follower_ids(self, user_id: str) -> Set[str]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				"SELECT follower_id FROM followers WHERE following_id = $1",
				user_id,
			)
		return {str(row["follower_id"]) for row in rows}

	async def recent_posts(self, viewer_id: str, *, limit: int) -> List[Post]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"{POST_SELECT} ORDER BY p.created_at DESC LIMIT $2",
				viewer_id,
				limit,
			)
		return [Post.from_record(row) for row in rows]

	async def recent_shares(self, viewer_id: str, sharer_ids: Iterable[str], *, limit: int) -> List[Share]:
		pool = await get_pool()
		async with pool.acquire() as conn:
			rows = await conn.fetch(
				f"{SHARE_SELECT} WHERE s.user_id = ANY($2::uuid[]) ORDER BY s.created_at DESC LIMIT $3",
				viewer_id,
				list(sharer_ids),
				limit,
			)
		return [Share.from_record(row) for row in rows]

	async def count_posts(self) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(await conn.fetchval("SELECT COUNT(*) FROM posts"))

	async def count_shares(self, sharer_ids: Iterable[str]) -> int:
		pool = await get_pool()
		async with pool.acquire() as conn:
			return int(
				await conn.fetchval(
					"SELECT COUNT(*) FROM shares WHERE user_id = ANY($1::uuid[])",
					list(sharer_ids),
				)
			)
