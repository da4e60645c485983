"""Search over active users and the post content a viewer may see."""

from __future__ import annotations

import logging
from typing import Optional

from bubbly.domain.common.exceptions import RateLimited, ValidationFailed
from bubbly.domain.common.paging import PageRequest, total_pages
from bubbly.domain.feed.models import ViewerContext
from bubbly.domain.feed.schemas import PostView
from bubbly.domain.feed.visibility import can_view_post
from bubbly.domain.search.models import MAX_QUERY_LENGTH
from bubbly.domain.search.repo import PostgresSearchRepository, SearchRepository
from bubbly.domain.search.schemas import (
	PostSearchResponse,
	SearchAllData,
	SearchAllResponse,
	SearchCounts,
	SearchPagination,
	UserResult,
	UserSearchResponse,
)
from bubbly.infra.auth import AuthenticatedUser
from bubbly.infra.rate_limit import allow as rate_allow
from bubbly.obs import metrics as obs_metrics
from bubbly.settings import settings

logger = logging.getLogger(__name__)


def normalise_query(raw: Optional[str], *, strip_mention: bool) -> str:
	term = (raw or "").strip()
	if strip_mention and term.startswith("@"):
		term = term[1:].strip()
	if not term:
		raise ValidationFailed("Search query is required", reason="empty_query")
	return term[:MAX_QUERY_LENGTH]


def _pagination(page: PageRequest, returned: int, total: int) -> SearchPagination:
	return SearchPagination(
		current_page=page.page,
		total_pages=total_pages(total, page.limit),
		total_results=total,
		has_more=page.offset + returned < total,
	)


class SearchService:
	def __init__(self, repository: Optional[SearchRepository] = None) -> None:
		self._repo = repository or PostgresSearchRepository()

	async def _enforce_rate_limit(self, user_id: str) -> None:
		if not await rate_allow("search", user_id, limit=settings.search_per_minute, window_seconds=60):
			obs_metrics.inc_rate_limited("search")
			raise RateLimited("Too many searches, slow down", reason="search_rate_limited")

	async def _viewer(self, viewer_id: str) -> ViewerContext:
		return ViewerContext.build(
			viewer_id,
			await self._repo.following_ids(viewer_id),
			await self._repo.follower_ids(viewer_id),
		)

	async def _users(self, term: str, viewer_id: str, offset: int, limit: int) -> list[UserResult]:
		hits = await self._repo.search_users(term, viewer_id, offset=offset, limit=limit)
		return [UserResult.from_hit(hit) for hit in hits]

	async def _posts(self, term: str, viewer: ViewerContext, offset: int, limit: int) -> tuple[list[PostView], int]:
		posts = await self._repo.search_posts(term, viewer.viewer_id, offset=offset, limit=limit)
		return [PostView.from_post(post) for post in posts if can_view_post(post, viewer)], len(posts)

	async def search_users(self, auth_user: AuthenticatedUser, q: Optional[str], page: PageRequest) -> UserSearchResponse:
		term = normalise_query(q, strip_mention=True)
		await self._enforce_rate_limit(auth_user.id)
		users = await self._users(term, auth_user.id, page.offset, page.limit)
		total = await self._repo.count_users(term)
		return UserSearchResponse(data=users, pagination=_pagination(page, len(users), total))

	async def search_posts(self, auth_user: AuthenticatedUser, q: Optional[str], page: PageRequest) -> PostSearchResponse:
		term = normalise_query(q, strip_mention=False)
		await self._enforce_rate_limit(auth_user.id)
		viewer = await self._viewer(auth_user.id)
		posts, fetched = await self._posts(term, viewer, page.offset, page.limit)
		total = await self._repo.count_posts(term, auth_user.id)
		logger.debug("post search", extra={"viewer_id": auth_user.id, "fetched": fetched, "returned": len(posts)})
		return PostSearchResponse(data=posts, pagination=_pagination(page, fetched, total))

	async def search_all(self, auth_user: AuthenticatedUser, q: Optional[str], limit: int = 5) -> SearchAllResponse:
		term = normalise_query(q, strip_mention=True)
		await self._enforce_rate_limit(auth_user.id)
		viewer = await self._viewer(auth_user.id)
		users = await self._users(term, auth_user.id, 0, limit)
		posts, _ = await self._posts(term, viewer, 0, limit)
		total_users = await self._repo.count_users(term)
		total_posts = await self._repo.count_posts(term, auth_user.id)
		return SearchAllResponse(
			data=SearchAllData(users=users, posts=posts),
			counts=SearchCounts(users=total_users, posts=total_posts, total=total_users + total_posts),
		)


_SERVICE = SearchService()


async def search_users(auth_user: AuthenticatedUser, q: Optional[str], page: PageRequest) -> UserSearchResponse:
	return await _SERVICE.search_users(auth_user, q, page)


async def search_posts(auth_user: AuthenticatedUser, q: Optional[str], page: PageRequest) -> PostSearchResponse:
	return await _SERVICE.search_posts(auth_user, q, page)


async def search_all(auth_user: AuthenticatedUser, q: Optional[str], limit: int = 5) -> SearchAllResponse:
	return await _SERVICE.search_all(auth_user, q, limit)
