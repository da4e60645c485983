"""Audience visibility rules for posts and shares.

A ``Following`` item is visible when its *author follows the viewer*, not the
other way round. Authors choose the people they follow as their audience.
"""

from __future__ import annotations

from bubbly.domain.feed.models import Audience, Post, Share, ViewerContext


def can_view(author_id: str, audience: Audience | str, viewer: ViewerContext) -> bool:
	if author_id == viewer.viewer_id:
		return True
	audience = Audience(audience)
	if audience is Audience.PUBLIC:
		return True
	if audience is Audience.FOLLOWING:
		return viewer.is_followed_by(author_id)
	return False


def can_view_post(post: Post, viewer: ViewerContext) -> bool:
	return can_view(post.author_id, post.audience, viewer)


def can_view_share(share: Share, viewer: ViewerContext) -> bool:
	"""Both the share's own audience and the embedded post's audience must pass."""
	if share.post is None:
		return False
	if not can_view(share.sharer_id, share.audience, viewer):
		return False
	return can_view_post(share.post, viewer)


def visible_audiences(author_id: str, viewer: ViewerContext) -> tuple[Audience, ...]:
	"""Audiences of ``author_id``'s items that ``viewer`` may see, for SQL filters."""
	return tuple(audience for audience in Audience if can_view(author_id, audience, viewer))
