"""Reactions on posts and shares."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from bubbly.domain.common.exceptions import NotFound
from bubbly.domain.common.paging import PageRequest, build_pagination
from bubbly.domain.common.schemas import PageResponse
from bubbly.domain.feed.models import ViewerContext
from bubbly.domain.feed.schemas import PostView, UserSummaryView
from bubbly.domain.feed.visibility import can_view_post
from bubbly.domain.notifications import service as notifications
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.posts.access import ensure_post_visible, ensure_share_visible
from bubbly.domain.posts.repo import PostgresPostRepository, PostRepository
from bubbly.domain.reactions.models import ReactionOutcome, ReactionSubject, ReactionType, resolve_reaction
from bubbly.domain.reactions.repo import PostgresReactionRepository, ReactionRepository
from bubbly.domain.reactions.schemas import (
	ReactionCheckResponse,
	ReactionSummary,
	ReactionToggleResponse,
	ReactorView,
)
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

_MESSAGES = {
	ReactionOutcome.ADDED: "Reaction added",
	ReactionOutcome.UPDATED: "Reaction updated",
	ReactionOutcome.REMOVED: "Reaction removed",
}


class ReactionService:
	def __init__(
		self,
		repository: Optional[ReactionRepository] = None,
		posts: Optional[PostRepository] = None,
		notification_service: Optional[notifications.NotificationService] = None,
	) -> None:
		self._repo = repository or PostgresReactionRepository()
		self._posts = posts or PostgresPostRepository()
		self._notifications = notification_service or notifications.get_service()

	async def _subject(
		self,
		subject: ReactionSubject,
		subject_id: str,
		viewer_id: str,
	) -> Tuple[str, Optional[str], Optional[str]]:
		"""Return (owner_id, post_id, share_id) after checking the viewer may see it."""
		if subject is ReactionSubject.POST:
			post = await self._posts.get_post(subject_id, viewer_id)
			if post is None:
				raise NotFound("Post not found", reason="post_not_found")
			await ensure_post_visible(self._posts, post, viewer_id)
			return post.author_id, post.id, None
		share = await self._posts.get_share(subject_id, viewer_id)
		if share is None:
			raise NotFound("Share not found", reason="share_not_found")
		await ensure_share_visible(self._posts, share, viewer_id)
		return share.sharer_id, share.post_id, share.id

	async def _summary(
		self,
		subject: ReactionSubject,
		subject_id: str,
		current: Optional[ReactionType],
	) -> ReactionSummary:
		counts = await self._repo.reaction_counts(subject, subject_id)
		full = {kind.value: int(counts.get(kind.value, 0)) for kind in ReactionType}
		return ReactionSummary(
			reacted=current is not None,
			reaction_type=current,
			total_reactions=sum(full.values()),
			reaction_counts=full,
		)

	async def react(
		self,
		auth_user: AuthenticatedUser,
		subject: ReactionSubject,
		subject_id: str,
		reaction_type: ReactionType,
	) -> ReactionToggleResponse:
		owner_id, post_id, share_id = await self._subject(subject, subject_id, auth_user.id)
		existing = await self._repo.get_reaction(subject, subject_id, auth_user.id)
		outcome = resolve_reaction(existing, reaction_type)
		if outcome is ReactionOutcome.REMOVED:
			await self._repo.delete_reaction(subject, subject_id, auth_user.id)
		else:
			await self._repo.set_reaction(subject, subject_id, auth_user.id, reaction_type)
		obs_metrics.inc_reaction(subject.value, outcome.value)

		if outcome is ReactionOutcome.ADDED:
			await self._notifications.create_notification(
				recipient_id=owner_id,
				sender_id=auth_user.id,
				kind=NotificationType.REACTION,
				content=f"reacted {reaction_type.value} to your {subject.value}",
				post_id=post_id,
				share_id=share_id,
				reaction_type=reaction_type.value,
			)

		current = None if outcome is ReactionOutcome.REMOVED else reaction_type
		return ReactionToggleResponse(
			message=_MESSAGES[outcome],
			data=await self._summary(subject, subject_id, current),
		)

	async def remove_reaction(
		self,
		auth_user: AuthenticatedUser,
		subject: ReactionSubject,
		subject_id: str,
	) -> ReactionToggleResponse:
		await self._subject(subject, subject_id, auth_user.id)
		removed = await self._repo.delete_reaction(subject, subject_id, auth_user.id)
		if not removed:
			raise NotFound("Reaction not found", reason="reaction_not_found")
		obs_metrics.inc_reaction(subject.value, ReactionOutcome.REMOVED.value)
		return ReactionToggleResponse(
			message=_MESSAGES[ReactionOutcome.REMOVED],
			data=await self._summary(subject, subject_id, None),
		)

	async def list_reactors(
		self,
		auth_user: AuthenticatedUser,
		subject: ReactionSubject,
		subject_id: str,
		page: PageRequest,
		reaction_type: Optional[ReactionType] = None,
	) -> PageResponse[ReactorView]:
		await self._subject(subject, subject_id, auth_user.id)
		reactions = await self._repo.list_reactions(
			subject,
			subject_id,
			reaction_type=reaction_type,
			offset=page.offset,
			limit=page.limit,
		)
		total = await self._repo.count_reactions(subject, subject_id, reaction_type=reaction_type)
		following = await self._posts.following_ids(auth_user.id)
		return PageResponse[ReactorView](
			data=[
				ReactorView(
					user=UserSummaryView.from_summary(reaction.user, reaction.user_id),
					reaction_type=reaction.reaction_type,
					created_at=reaction.created_at,
					is_following=reaction.user_id in following,
				)
				for reaction in reactions
			],
			pagination=build_pagination(page, len(reactions), total),
		)

	async def check_reaction(
		self,
		auth_user: AuthenticatedUser,
		subject: ReactionSubject,
		subject_id: str,
	) -> ReactionCheckResponse:
		await self._subject(subject, subject_id, auth_user.id)
		current = await self._repo.get_reaction(subject, subject_id, auth_user.id)
		return ReactionCheckResponse(reacted=current is not None, reaction_type=current)

	async def list_user_reacted_posts(
		self,
		auth_user: AuthenticatedUser,
		user_id: str,
		page: PageRequest,
	) -> PageResponse[PostView]:
		viewer = ViewerContext.build(
			auth_user.id,
			await self._posts.following_ids(auth_user.id),
			await self._posts.follower_ids(auth_user.id),
		)
		posts = await self._repo.list_reacted_posts(user_id, auth_user.id, offset=page.offset, limit=page.limit)
		total = await self._repo.count_reacted_posts(user_id, auth_user.id)
		return PageResponse[PostView](
			data=[PostView.from_post(post) for post in posts if can_view_post(post, viewer)],
			pagination=build_pagination(page, len(posts), total),
		)


_SERVICE = ReactionService()


async def react(
	auth_user: AuthenticatedUser,
	subject: ReactionSubject,
	subject_id: str,
	reaction_type: ReactionType,
) -> ReactionToggleResponse:
	return await _SERVICE.react(auth_user, subject, subject_id, reaction_type)


async def remove_reaction(auth_user: AuthenticatedUser, subject: ReactionSubject, subject_id: str) -> ReactionToggleResponse:
	return await _SERVICE.remove_reaction(auth_user, subject, subject_id)


async def list_reactors(
	auth_user: AuthenticatedUser,
	subject: ReactionSubject,
	subject_id: str,
	page: PageRequest,
	reaction_type: Optional[ReactionType] = None,
) -> PageResponse[ReactorView]:
	return await _SERVICE.list_reactors(auth_user, subject, subject_id, page, reaction_type)


async def check_reaction(auth_user: AuthenticatedUser, subject: ReactionSubject, subject_id: str) -> ReactionCheckResponse:
	return await _SERVICE.check_reaction(auth_user, subject, subject_id)


async def list_user_reacted_posts(auth_user: AuthenticatedUser, user_id: str, page: PageRequest) -> PageResponse[PostView]:
	return await _SERVICE.list_user_reacted_posts(auth_user, user_id, page)
