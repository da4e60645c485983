"""Wire DTOs for posts, shares and the home feed."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.models import AuthorSummary, Audience, Post, Share


class UserSummaryView(CamelModel):
	id: str
	username: Optional[str] = None
	full_name: Optional[str] = None
	profile_picture: Optional[str] = None
	is_verified: bool = False

	@classmethod
	def from_summary(cls, summary: AuthorSummary | None, fallback_id: str) -> "UserSummaryView":
		if summary is None:
			return cls(id=fallback_id)
		return cls(
			id=summary.id,
			username=summary.username,
			full_name=summary.full_name,
			profile_picture=summary.profile_picture,
			is_verified=summary.is_verified,
		)


class PostView(CamelModel):
	id: str
	author: UserSummaryView
	content: Optional[str] = None
	files: List[str] = Field(default_factory=list)
	audience: Audience
	reaction_count: int = 0
	comment_count: int = 0
	share_count: int = 0
	user_reaction: Optional[str] = None
	created_at: datetime
	updated_at: datetime

	@classmethod
	def from_post(cls, post: Post) -> "PostView":
		return cls(
			id=post.id,
			author=UserSummaryView.from_summary(post.author, post.author_id),
			content=post.content,
			files=list(post.files),
			audience=post.audience,
			reaction_count=post.reaction_count,
			comment_count=post.comment_count,
			share_count=post.share_count,
			user_reaction=post.viewer_reaction,
			created_at=post.created_at,
			updated_at=post.updated_at,
		)


class ShareView(CamelModel):
	id: str
	user: UserSummaryView
	post: Optional[PostView] = None
	share_caption: Optional[str] = None
	audience: Audience
	reaction_count: int = 0
	comment_count: int = 0
	user_reaction: Optional[str] = None
	created_at: datetime
	updated_at: datetime

	@classmethod
	def from_share(cls, share: Share) -> "ShareView":
		return cls(
			id=share.id,
			user=UserSummaryView.from_summary(share.sharer, share.sharer_id),
			post=PostView.from_post(share.post) if share.post is not None else None,
			share_caption=share.caption,
			audience=share.audience,
			reaction_count=share.reaction_count,
			comment_count=share.comment_count,
			user_reaction=share.viewer_reaction,
			created_at=share.created_at,
			updated_at=share.updated_at,
		)


class FeedPostItem(PostView):
	type: Literal["post"] = "post"


class FeedShareItem(ShareView):
	type: Literal["share"] = "share"


FeedItem = Annotated[Union[FeedPostItem, FeedShareItem], Field(discriminator="type")]


class FeedPagination(CamelModel):
	current_page: int
	total_pages: int
	total_posts: int
	total_shares: int
	has_more: bool


class FeedResponse(CamelModel):
	success: bool = True
	data: List[FeedItem]
	pagination: FeedPagination
