"""Follow / unfollow and follow-graph listings."""

from __future__ import annotations

import logging
from typing import List, Optional

from bubbly.domain.common.exceptions import Conflict, NotFound, ValidationFailed
from bubbly.domain.common.paging import PageRequest, build_pagination
from bubbly.domain.common.schemas import PageResponse
from bubbly.domain.notifications import service as notifications
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.social.models import FollowEdge
from bubbly.domain.social.repo import FollowRepository, PostgresFollowRepository
from bubbly.domain.social.schemas import FollowEdgeView, FollowStatus, SuggestionView
from bubbly.infra.auth import AuthenticatedUser
from bubbly.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class FollowService:
	def __init__(
		self,
		repository: Optional[FollowRepository] = None,
		notification_service: Optional[notifications.NotificationService] = None,
	) -> None:
		self._repo = repository or PostgresFollowRepository()
		self._notifications = notification_service or notifications.get_service()

	async def _require_user(self, user_id: str) -> None:
		if await self._repo.get_user(user_id) is None:
			raise NotFound("User not found", reason="user_not_found")

	async def follow(self, auth_user: AuthenticatedUser, target_id: str) -> FollowStatus:
		if target_id == auth_user.id:
			raise ValidationFailed("You cannot follow yourself", reason="self_follow")
		await self._require_user(target_id)
		if await self._repo.is_following(auth_user.id, target_id):
			raise Conflict("You are already following this user", reason="already_following")
		await self._repo.create_follow(auth_user.id, target_id)
		obs_metrics.inc_follow_change("follow")
		await self._notifications.create_notification(
			recipient_id=target_id,
			sender_id=auth_user.id,
			kind=NotificationType.FOLLOW,
			content="started following you",
		)
		return await self.status(auth_user, target_id)

	async def unfollow(self, auth_user: AuthenticatedUser, target_id: str) -> FollowStatus:
		if target_id == auth_user.id:
			raise ValidationFailed("You cannot unfollow yourself", reason="self_follow")
		removed = await self._repo.delete_follow(auth_user.id, target_id)
		if not removed:
			raise ValidationFailed("You are not following this user", reason="not_following")
		obs_metrics.inc_follow_change("unfollow")
		return await self.status(auth_user, target_id)

	async def status(self, auth_user: AuthenticatedUser, target_id: str) -> FollowStatus:
		counts = await self._repo.counts(target_id)
		return FollowStatus(
			is_following=await self._repo.is_following(auth_user.id, target_id),
			followers_count=counts.followers,
			following_count=counts.following,
		)

	async def _edge_page(
		self,
		auth_user: AuthenticatedUser,
		edges: List[FollowEdge],
		page: PageRequest,
		total: int,
	) -> PageResponse[FollowEdgeView]:
		viewer_following = await self._repo.following_ids(auth_user.id)
		return PageResponse[FollowEdgeView](
			data=[
				FollowEdgeView(
					id=edge.user.id,
					username=edge.user.username,
					full_name=edge.user.full_name,
					profile_picture=edge.user.profile_picture,
					is_verified=edge.user.is_verified,
					is_following=edge.user.id in viewer_following,
					followed_at=edge.followed_at,
				)
				for edge in edges
			],
			pagination=build_pagination(page, len(edges), total),
		)

	async def followers(self, auth_user: AuthenticatedUser, user_id: str, page: PageRequest) -> PageResponse[FollowEdgeView]:
		await self._require_user(user_id)
		edges = await self._repo.list_followers(user_id, offset=page.offset, limit=page.limit)
		counts = await self._repo.counts(user_id)
		return await self._edge_page(auth_user, edges, page, counts.followers)

	async def following(self, auth_user: AuthenticatedUser, user_id: str, page: PageRequest) -> PageResponse[FollowEdgeView]:
		await self._require_user(user_id)
		edges = await self._repo.list_following(user_id, offset=page.offset, limit=page.limit)
		counts = await self._repo.counts(user_id)
		return await self._edge_page(auth_user, edges, page, counts.following)

	async def suggestions(self, auth_user: AuthenticatedUser, limit: int = 5) -> List[SuggestionView]:
		rows = await self._repo.suggestions(auth_user.id, limit=limit)
		return [
			SuggestionView(
				id=summary.id,
				username=summary.username,
				full_name=summary.full_name,
				profile_picture=summary.profile_picture,
				is_verified=summary.is_verified,
				followers_count=followers_count,
			)
			for summary, followers_count in rows
		]


_SERVICE = FollowService()


async def follow(auth_user: AuthenticatedUser, target_id: str) -> FollowStatus:
	return await _SERVICE.follow(auth_user, target_id)


async def unfollow(auth_user: AuthenticatedUser, target_id: str) -> FollowStatus:
	return await _SERVICE.unfollow(auth_user, target_id)


async def status(auth_user: AuthenticatedUser, target_id: str) -> FollowStatus:
	return await _SERVICE.status(auth_user, target_id)


async def followers(auth_user: AuthenticatedUser, user_id: str, page: PageRequest) -> PageResponse[FollowEdgeView]:
	return await _SERVICE.followers(auth_user, user_id, page)


async def following(auth_user: AuthenticatedUser, user_id: str, page: PageRequest) -> PageResponse[FollowEdgeView]:
	return await _SERVICE.following(auth_user, user_id, page)


async def suggestions(auth_user: AuthenticatedUser, limit: int = 5) -> List[SuggestionView]:
	return await _SERVICE.suggestions(auth_user, limit)
