"""Post and share operations."""

from __future__ import annotations

import logging
from typing import List, Optional

from bubbly.domain.common.exceptions import Conflict, Forbidden, NotFound, ValidationFailed
from bubbly.domain.common.paging import PageRequest, build_pagination
from bubbly.domain.common.schemas import PageResponse
from bubbly.domain.feed.models import MAX_POST_FILES, Post, Share, ViewerContext
from bubbly.domain.feed.schemas import PostView, ShareView, UserSummaryView
from bubbly.domain.feed.visibility import can_view, can_view_share, visible_audiences
from bubbly.domain.notifications import service as notifications
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.posts.access import PRIVATE_POST, PRIVATE_POST_SHARE, ensure_post_visible
from bubbly.domain.posts.repo import PostgresPostRepository, PostRepository
from bubbly.domain.posts.schemas import (
	PostCreateRequest,
	PostUpdateRequest,
	ShareCreateRequest,
	ShareResult,
	ShareUpdateRequest,
	SharerView,
)
from bubbly.domain.realtime import sockets
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


def _normalise_content(content: Optional[str]) -> Optional[str]:
	if content is None:
		return None
	stripped = content.strip()
	return stripped or None


def _check_body(content: Optional[str], files: List[str]) -> None:
	if not content and not files:
		raise ValidationFailed("Post must have content or at least one file", reason="empty_post")
	if len(files) > MAX_POST_FILES:
		raise ValidationFailed(f"A post can carry at most {MAX_POST_FILES} files", reason="too_many_files")


class PostService:
	def __init__(
		self,
		repository: Optional[PostRepository] = None,
		notification_service: Optional[notifications.NotificationService] = None,
	) -> None:
		self._repo = repository or PostgresPostRepository()
		self._notifications = notification_service or notifications.get_service()

	async def _viewer_context(self, viewer_id: str) -> ViewerContext:
		return ViewerContext.build(
			viewer_id,
			await self._repo.following_ids(viewer_id),
			await self._repo.follower_ids(viewer_id),
		)

	async def _load_post(self, post_id: str, viewer_id: str) -> Post:
		post = await self._repo.get_post(post_id, viewer_id)
		if post is None:
			raise NotFound("Post not found", reason="post_not_found")
		return post

	async def _load_share(self, share_id: str, viewer_id: str) -> Share:
		share = await self._repo.get_share(share_id, viewer_id)
		if share is None:
			raise NotFound("Share not found", reason="share_not_found")
		return share

	# --- posts ---

	async def create_post(self, auth_user: AuthenticatedUser, payload: PostCreateRequest) -> PostView:
		content = _normalise_content(payload.content)
		files = [path for path in payload.files if path]
		_check_body(content, files)
		post = await self._repo.create_post(
			author_id=auth_user.id,
			content=content,
			files=files,
			audience=payload.audience,
		)
		obs_metrics.inc_post_created()
		logger.info("post created", extra={"post_id": post.id, "audience": post.audience.value})
		return PostView.from_post(post)

	async def get_post(self, auth_user: AuthenticatedUser, post_id: str) -> PostView:
		post = await self._load_post(post_id, auth_user.id)
		await ensure_post_visible(self._repo, post, auth_user.id, private_message=PRIVATE_POST)
		return PostView.from_post(post)

	async def update_post(self, auth_user: AuthenticatedUser, post_id: str, payload: PostUpdateRequest) -> PostView:
		post = await self._load_post(post_id, auth_user.id)
		if post.author_id != auth_user.id:
			raise Forbidden("Not authorized to update this post", reason="not_owner")
		fields = payload.model_fields_set
		content = _normalise_content(payload.content) if "content" in fields else post.content
		files = [path for path in payload.files or [] if path] if "files" in fields else list(post.files)
		audience = payload.audience or post.audience
		_check_body(content, files)
		await self._repo.update_post(post_id, content=content, files=files, audience=audience)
		return PostView.from_post(await self._load_post(post_id, auth_user.id))

	async def delete_post(self, auth_user: AuthenticatedUser, post_id: str) -> None:
		post = await self._load_post(post_id, auth_user.id)
		if post.author_id != auth_user.id:
			raise Forbidden("Not authorized to delete this post", reason="not_owner")
		await self._repo.delete_post(post_id)
		logger.info("post deleted", extra={"post_id": post_id})

	async def list_user_posts(
		self,
		auth_user: AuthenticatedUser,
		author_id: str,
		page: PageRequest,
	) -> PageResponse[PostView]:
		author_follows_viewer = author_id != auth_user.id and await self._repo.is_following(author_id, auth_user.id)
		viewer = ViewerContext.for_author(auth_user.id, author_id, author_follows_viewer=author_follows_viewer)
		audiences = visible_audiences(author_id, viewer)
		posts = await self._repo.list_posts_by_author(
			author_id,
			auth_user.id,
			audiences,
			offset=page.offset,
			limit=page.limit,
		)
		total = await self._repo.count_posts_by_author(author_id, audiences)
		return PageResponse[PostView](
			data=[PostView.from_post(post) for post in posts],
			pagination=build_pagination(page, len(posts), total),
		)

	# --- shares ---

	async def share_post(
		self,
		auth_user: AuthenticatedUser,
		post_id: str,
		payload: ShareCreateRequest,
	) -> ShareResult:
		post = await self._load_post(post_id, auth_user.id)
		await ensure_post_visible(self._repo, post, auth_user.id, private_message=PRIVATE_POST_SHARE)
		if await self._repo.get_share_by_user(post_id, auth_user.id) is not None:
			raise Conflict("You have already shared this post", reason="already_shared")
		share = await self._repo.create_share(
			post_id=post_id,
			user_id=auth_user.id,
			caption=_normalise_content(payload.share_caption),
			audience=payload.audience,
		)
		share_count = await self._repo.count_post_shares(post_id)
		obs_metrics.inc_share_created()
		view = ShareView.from_share(share)
		await self._notifications.create_notification(
			recipient_id=post.author_id,
			sender_id=auth_user.id,
			kind=NotificationType.SHARE,
			content="shared your post",
			post_id=post_id,
			share_id=share.id,
		)
		if post.author_id != auth_user.id:
			await sockets.emit_new_share(
				post.author_id,
				{"share": view.model_dump(mode="json", by_alias=True), "shareCount": share_count},
			)
		return ShareResult(share=view, share_count=share_count)

	async def unshare_post(self, auth_user: AuthenticatedUser, post_id: str) -> int:
		share = await self._repo.get_share_by_user(post_id, auth_user.id)
		if share is None:
			raise NotFound("You have not shared this post", reason="share_not_found")
		await self._repo.delete_share(share.id)
		return await self._repo.count_post_shares(post_id)

	async def update_share(
		self,
		auth_user: AuthenticatedUser,
		share_id: str,
		payload: ShareUpdateRequest,
	) -> ShareView:
		share = await self._load_share(share_id, auth_user.id)
		if share.sharer_id != auth_user.id:
			raise Forbidden("Not authorized to update this share", reason="not_owner")
		fields = payload.model_fields_set
		caption = _normalise_content(payload.share_caption) if "share_caption" in fields else share.caption
		audience = payload.audience or share.audience
		await self._repo.update_share(share_id, caption=caption, audience=audience)
		return ShareView.from_share(await self._load_share(share_id, auth_user.id))

	async def check_shared(self, auth_user: AuthenticatedUser, post_id: str) -> bool:
		return await self._repo.get_share_by_user(post_id, auth_user.id) is not None

	async def list_post_shares(
		self,
		auth_user: AuthenticatedUser,
		post_id: str,
		page: PageRequest,
	) -> PageResponse[SharerView]:
		post = await self._load_post(post_id, auth_user.id)
		await ensure_post_visible(self._repo, post, auth_user.id)
		viewer = await self._viewer_context(auth_user.id)
		shares = await self._repo.list_post_shares(post_id, auth_user.id, offset=page.offset, limit=page.limit)
		total = await self._repo.count_post_shares(post_id)
		data = [
			SharerView(
				share_id=share.id,
				user=UserSummaryView.from_summary(share.sharer, share.sharer_id),
				share_caption=share.caption,
				audience=share.audience,
				created_at=share.created_at,
				is_following=viewer.follows(share.sharer_id),
			)
			for share in shares
			if can_view(share.sharer_id, share.audience, viewer)
		]
		return PageResponse[SharerView](data=data, pagination=build_pagination(page, len(shares), total))

	async def list_user_shares(
		self,
		auth_user: AuthenticatedUser,
		user_id: str,
		page: PageRequest,
	) -> PageResponse[ShareView]:
		viewer = await self._viewer_context(auth_user.id)
		audiences = visible_audiences(user_id, viewer)
		shares = await self._repo.list_shares_by_user(
			user_id,
			auth_user.id,
			audiences,
			offset=page.offset,
			limit=page.limit,
		)
		total = await self._repo.count_shares_by_user(user_id, audiences)
		data = [ShareView.from_share(share) for share in shares if can_view_share(share, viewer)]
		return PageResponse[ShareView](data=data, pagination=build_pagination(page, len(shares), total))


_SERVICE = PostService()


async def create_post(auth_user: AuthenticatedUser, payload: PostCreateRequest) -> PostView:
	return await _SERVICE.create_post(auth_user, payload)


async def get_post(auth_user: AuthenticatedUser, post_id: str) -> PostView:
	return await _SERVICE.get_post(auth_user, post_id)


async def update_post(auth_user: AuthenticatedUser, post_id: str, payload: PostUpdateRequest) -> PostView:
	return await _SERVICE.update_post(auth_user, post_id, payload)


async def delete_post(auth_user: AuthenticatedUser, post_id: str) -> None:
	await _SERVICE.delete_post(auth_user, post_id)


async def list_user_posts(auth_user: AuthenticatedUser, author_id: str, page: PageRequest) -> PageResponse[PostView]:
	return await _SERVICE.list_user_posts(auth_user, author_id, page)


async def share_post(auth_user: AuthenticatedUser, post_id: str, payload: ShareCreateRequest) -> ShareResult:
	return await _SERVICE.share_post(auth_user, post_id, payload)


async def unshare_post(auth_user: AuthenticatedUser, post_id: str) -> int:
	return await _SERVICE.unshare_post(auth_user, post_id)


async def update_share(auth_user: AuthenticatedUser, share_id: str, payload: ShareUpdateRequest) -> ShareView:
	return await _SERVICE.update_share(auth_user, share_id, payload)


async def check_shared(auth_user: AuthenticatedUser, post_id: str) -> bool:
	return await _SERVICE.check_shared(auth_user, post_id)


async def list_post_shares(auth_user: AuthenticatedUser, post_id: str, page: PageRequest) -> PageResponse[SharerView]:
	return await _SERVICE.list_post_shares(auth_user, post_id, page)


async def list_user_shares(auth_user: AuthenticatedUser, user_id: str, page: PageRequest) -> PageResponse[ShareView]:
	return await _SERVICE.list_user_shares(auth_user, user_id, page)
