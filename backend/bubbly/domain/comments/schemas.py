"""Pydantic schemas for comments."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bubbly.domain.comments.models import Comment
from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.schemas import UserSummaryView


class CommentRequest(CamelModel):
	content: str


class CommentView(CamelModel):
	id: str
	user: UserSummaryView
	post: Optional[str] = None
	share: Optional[str] = None
	content: str
	created_at: datetime
	updated_at: datetime

	@classmethod
	def from_comment(cls, comment: Comment) -> "CommentView":
		return cls(
			id=comment.id,
			user=UserSummaryView.from_summary(comment.user, comment.user_id),
			post=comment.post_id,
			share=comment.share_id,
			content=comment.content,
			created_at=comment.created_at,
			updated_at=comment.updated_at,
		)
