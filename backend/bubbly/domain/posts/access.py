"""Single-item access checks built on the feed visibility rules."""

from __future__ import annotations

from typing import Protocol

from bubbly.domain.common.exceptions import Forbidden, NotFound
from bubbly.domain.feed.models import Audience, Post, Share, ViewerContext
from bubbly.domain.feed.visibility import can_view_post, can_view_share

PRIVATE_POST = "This post is private"
PRIVATE_POST_SHARE = "This post is private and cannot be shared"
FOLLOWERS_ONLY_POST = "This post is only visible to people the author follows"


class FollowLookup(Protocol):
	async def is_following(self, follower_id: str, following_id: str) -> bool: ...


async def _context_for(graph: FollowLookup, viewer_id: str, *author_ids: str) -> ViewerContext:
	"""Context holding only the "author follows viewer" edges that matter here."""
	follower_ids = set()
	for author_id in set(author_ids):
		if author_id != viewer_id and await graph.is_following(author_id, viewer_id):
			follower_ids.add(author_id)
	return ViewerContext.build(viewer_id, follower_ids=follower_ids)


async def ensure_post_visible(
	graph: FollowLookup,
	post: Post,
	viewer_id: str,
	*,
	private_message: str = PRIVATE_POST,
) -> None:
	if post.author_id == viewer_id or post.audience is Audience.PUBLIC:
		return
	viewer = await _context_for(graph, viewer_id, post.author_id)
	if can_view_post(post, viewer):
		return
	if post.audience is Audience.ONLY_ME:
		raise Forbidden(private_message, reason="post_private")
	raise Forbidden(FOLLOWERS_ONLY_POST, reason="post_followers_only")


async def ensure_share_visible(graph: FollowLookup, share: Share, viewer_id: str) -> None:
	if share.post is None:
		raise NotFound("Share not found", reason="share_not_found")
	viewer = await _context_for(graph, viewer_id, share.sharer_id, share.post.author_id)
	if not can_view_share(share, viewer):
		raise Forbidden("This share is not visible to you", reason="share_hidden")
