"""Feed ordering and page slicing."""

from __future__ import annotations

from typing import List, Sequence

from bubbly.domain.common.paging import PageRequest, total_pages
from bubbly.domain.feed.merger import FeedEntry
from bubbly.domain.feed.models import ViewerContext
from bubbly.domain.feed.schemas import FeedPagination


def _bucket(entry: FeedEntry, viewer: ViewerContext) -> int:
	if entry.author_id == viewer.viewer_id or viewer.follows(entry.author_id):
		return 0
	return 1


def rank_entries(entries: Sequence[FeedEntry], viewer: ViewerContext) -> List[FeedEntry]:
	"""Own and followed authors first, newest first inside each bucket.

	Both passes are stable, so equal timestamps keep their merge order.
	"""
	ordered = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
	ordered.sort(key=lambda entry: _bucket(entry, viewer))
	return ordered


def paginate(entries: Sequence[FeedEntry], page: PageRequest) -> List[FeedEntry]:
	return list(entries[page.offset : page.offset + page.limit])


def build_feed_pagination(
	page: PageRequest,
	returned: int,
	*,
	total_posts: int,
	total_shares: int,
) -> FeedPagination:
	"""Pagination metadata from the unfiltered totals.

	``totalPages`` and ``hasMore`` may over-count when items are hidden by
	audience rules; clients stop paging on an empty page.
	"""
	total = total_posts + total_shares
	return FeedPagination(
		current_page=page.page,
		total_pages=total_pages(total, page.limit),
		total_posts=total_posts,
		total_shares=total_shares,
		has_more=page.offset + returned < total,
	)
