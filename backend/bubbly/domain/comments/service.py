"""Comments on posts and shares."""

from __future__ import annotations

import logging
from typing import Optional

from bubbly.domain.comments.models import MAX_COMMENT_LENGTH, Comment
from bubbly.domain.comments.repo import CommentRepository, PostgresCommentRepository
from bubbly.domain.comments.schemas import CommentView
from bubbly.domain.common.exceptions import Forbidden, NotFound, ValidationFailed
from bubbly.domain.common.paging import PageRequest, build_pagination
from bubbly.domain.common.schemas import PageResponse
from bubbly.domain.notifications import service as notifications
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.posts.access import ensure_post_visible, ensure_share_visible
from bubbly.domain.posts.repo import PostgresPostRepository, PostRepository
from bubbly.domain.reactions.models import ReactionSubject
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


def _clean(content: Optional[str]) -> str:
	text = (content or "").strip()
	if not text:
		raise ValidationFailed("Comment content is required", reason="empty_comment")
	if len(text) > MAX_COMMENT_LENGTH:
		raise ValidationFailed(
			f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters",
			reason="comment_too_long",
		)
	return text


class CommentService:
	def __init__(
		self,
		repository: Optional[CommentRepository] = None,
		posts: Optional[PostRepository] = None,
		notification_service: Optional[notifications.NotificationService] = None,
	) -> None:
		self._repo = repository or PostgresCommentRepository()
		self._posts = posts or PostgresPostRepository()
		self._notifications = notification_service or notifications.get_service()

	async def _subject_owner(self, subject: ReactionSubject, subject_id: str, viewer_id: str) -> str:
		if subject is ReactionSubject.POST:
			post = await self._posts.get_post(subject_id, viewer_id)
			if post is None:
				raise NotFound("Post not found", reason="post_not_found")
			await ensure_post_visible(self._posts, post, viewer_id)
			return post.author_id
		share = await self._posts.get_share(subject_id, viewer_id)
		if share is None:
			raise NotFound("Share not found", reason="share_not_found")
		await ensure_share_visible(self._posts, share, viewer_id)
		return share.sharer_id

	async def _load(self, comment_id: str) -> Comment:
		comment = await self._repo.get(comment_id)
		if comment is None:
			raise NotFound("Comment not found", reason="comment_not_found")
		return comment

	async def add_comment(
		self,
		auth_user: AuthenticatedUser,
		subject: ReactionSubject,
		subject_id: str,
		content: Optional[str],
	) -> CommentView:
		text = _clean(content)
		owner_id = await self._subject_owner(subject, subject_id, auth_user.id)
		comment = await self._repo.create(subject, subject_id, auth_user.id, text)
		obs_metrics.inc_comment_created(subject.value)
		await self._notifications.create_notification(
			recipient_id=owner_id,
			sender_id=auth_user.id,
			kind=NotificationType.COMMENT,
			content=f"commented on your {subject.value}",
			post_id=subject_id if subject is ReactionSubject.POST else None,
			share_id=subject_id if subject is ReactionSubject.SHARE else None,
		)
		return CommentView.from_comment(comment)

	async def list_comments(
		self,
		auth_user: AuthenticatedUser,
		subject: ReactionSubject,
		subject_id: str,
		page: PageRequest,
	) -> PageResponse[CommentView]:
		await self._subject_owner(subject, subject_id, auth_user.id)
		comments = await self._repo.list_for(subject, subject_id, offset=page.offset, limit=page.limit)
		total = await self._repo.count_for(subject, subject_id)
		return PageResponse[CommentView](
			data=[CommentView.from_comment(comment) for comment in comments],
			pagination=build_pagination(page, len(comments), total),
		)

	async def update_comment(self, auth_user: AuthenticatedUser, comment_id: str, content: Optional[str]) -> CommentView:
		comment = await self._load(comment_id)
		if comment.user_id != auth_user.id:
			raise Forbidden("Not authorized to update this comment", reason="not_owner")
		await self._repo.update(comment_id, _clean(content))
		return CommentView.from_comment(await self._load(comment_id))

	async def delete_comment(self, auth_user: AuthenticatedUser, comment_id: str) -> None:
		"""The comment's author or the owner of the commented item may delete it."""
		comment = await self._load(comment_id)
		if comment.user_id != auth_user.id:
			owner_id = None
			if comment.post_id and not comment.share_id:
				post = await self._posts.get_post(comment.post_id, auth_user.id)
				owner_id = post.author_id if post else None
			elif comment.share_id:
				share = await self._posts.get_share(comment.share_id, auth_user.id)
				owner_id = share.sharer_id if share else None
			if owner_id != auth_user.id:
				raise Forbidden("Not authorized to delete this comment", reason="not_owner")
		await self._repo.delete(comment_id)


_SERVICE = CommentService()


async def add_comment(
	auth_user: AuthenticatedUser,
	subject: ReactionSubject,
	subject_id: str,
	content: Optional[str],
) -> CommentView:
	return await _SERVICE.add_comment(auth_user, subject, subject_id, content)


async def list_comments(
	auth_user: AuthenticatedUser,
	subject: ReactionSubject,
	subject_id: str,
	page: PageRequest,
) -> PageResponse[CommentView]:
	return await _SERVICE.list_comments(auth_user, subject, subject_id, page)


async def update_comment(auth_user: AuthenticatedUser, comment_id: str, content: Optional[str]) -> CommentView:
	return await _SERVICE.update_comment(auth_user, comment_id, content)


async def delete_comment(auth_user: AuthenticatedUser, comment_id: str) -> None:
	await _SERVICE.delete_comment(auth_user, comment_id)
