"""Home feed composition."""

from __future__ import annotations

import logging
from typing import Optional

from bubbly.domain.common.paging import PageRequest
from bubbly.domain.feed.merger import merge_feed
from bubbly.domain.feed.models import ViewerContext
from bubbly.domain.feed.ranker import build_feed_pagination, paginate, rank_entries
from bubbly.domain.feed.repo import FeedRepository, PostgresFeedRepository
from bubbly.domain.feed.schemas import FeedResponse
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

POST_WINDOW_FACTOR = 3
SHARE_WINDOW_FACTOR = 2


class FeedService:
	def __init__(self, repository: Optional[FeedRepository] = None) -> None:
		self._repo = repository or PostgresFeedRepository()

	async def viewer_context(self, viewer_id: str) -> ViewerContext:
		following = await self._repo.following_ids(viewer_id)
		followers = await self._repo.follower_ids(viewer_id)
		return ViewerContext.build(viewer_id, following, followers)

	async def get_feed(self, auth_user: AuthenticatedUser, page: PageRequest) -> FeedResponse:
		"""Build one feed page from a bounded window of recent posts and shares.

		Only ``limit*3`` posts and ``limit*2`` shares are considered, so deep
		pages can come back short even when older visible items exist.
		"""
		viewer = await self.viewer_context(auth_user.id)
		sharer_ids = {viewer.viewer_id, *viewer.following_ids}

		posts = await self._repo.recent_posts(viewer.viewer_id, limit=page.limit * POST_WINDOW_FACTOR)
		shares = await self._repo.recent_shares(
			viewer.viewer_id,
			sharer_ids,
			limit=page.limit * SHARE_WINDOW_FACTOR,
		)

		entries = merge_feed(viewer, posts, shares)
		ranked = rank_entries(entries, viewer)
		page_entries = paginate(ranked, page)

		total_posts = await self._repo.count_posts()
		total_shares = await self._repo.count_shares(sharer_ids)

		posts_kept = sum(1 for entry in entries if entry.item.type == "post")
		shares_kept = len(entries) - posts_kept
		obs_metrics.feed_served(
			posts_kept=posts_kept,
			posts_dropped=len(posts) - posts_kept,
			shares_kept=shares_kept,
			shares_dropped=len(shares) - shares_kept,
		)
		logger.debug(
			"feed_page",
			extra={"viewer_id": viewer.viewer_id, "page": page.page, "items": len(page_entries)},
		)
		return FeedResponse(
			data=[entry.item for entry in page_entries],
			pagination=build_feed_pagination(
				page,
				len(page_entries),
				total_posts=total_posts,
				total_shares=total_shares,
			),
		)


_SERVICE = FeedService()


async def get_feed(auth_user: AuthenticatedUser, page: PageRequest) -> FeedResponse:
	return await _SERVICE.get_feed(auth_user, page)
