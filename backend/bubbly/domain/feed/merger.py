"""Combine the post and share working sets into visible, tagged feed entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Union

from bubbly.domain.feed.models import Post, Share, ViewerContext
from bubbly.domain.feed.schemas import FeedPostItem, FeedShareItem
from bubbly.domain.feed.visibility import can_view_post, can_view_share


@dataclass(slots=True)
class FeedEntry:
	"""A tagged feed item plus the fields the ranker orders by."""

	author_id: str
	created_at: datetime
	item: Union[FeedPostItem, FeedShareItem]


def post_entry(post: Post) -> FeedEntry:
	return FeedEntry(author_id=post.author_id, created_at=post.created_at, item=FeedPostItem.from_post(post))


def share_entry(share: Share) -> FeedEntry:
	# The embedded post view carries the viewer's reaction on the post itself.
	return FeedEntry(author_id=share.sharer_id, created_at=share.created_at, item=FeedShareItem.from_share(share))


def merge_feed(
	viewer: ViewerContext,
	posts: Iterable[Post],
	shares: Iterable[Share],
) -> List[FeedEntry]:
	"""Filter both working sets through the audience rules and tag the survivors.

	Posts come first and shares second; the ranker's stable sort keeps that
	order for equal timestamps.
	"""
	entries: List[FeedEntry] = [post_entry(post) for post in posts if can_view_post(post, viewer)]
	entries.extend(share_entry(share) for share in shares if can_view_share(share, viewer))
	return entries
