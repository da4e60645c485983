"""Reaction endpoints for posts (``/api/reactions``) and shares (``/api/share-reactions``)."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from bubbly.api.pagination import page_params
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import PageResponse
from bubbly.domain.feed.schemas import PostView
from bubbly.domain.reactions import service
from bubbly.domain.reactions.models import ReactionSubject, ReactionType
from bubbly.domain.reactions.schemas import (
	ReactionCheckResponse,
	ReactionRequest,
	ReactionToggleResponse,
	ReactorView,
)
from bubbly.infra.auth import AuthenticatedUser, get_current_user


def _build_router(prefix: str, subject: ReactionSubject) -> APIRouter:
	router = APIRouter(prefix=prefix)

	@router.post("/{subject_id}", response_model=ReactionToggleResponse)
	async def react(
		subject_id: UUID,
		payload: ReactionRequest,
		auth_user: AuthenticatedUser = Depends(get_current_user),
	) -> ReactionToggleResponse:
		return await service.react(auth_user, subject, str(subject_id), payload.reaction_type)

	@router.delete("/{subject_id}", response_model=ReactionToggleResponse)
	async def remove_reaction(
		subject_id: UUID,
		auth_user: AuthenticatedUser = Depends(get_current_user),
	) -> ReactionToggleResponse:
		return await service.remove_reaction(auth_user, subject, str(subject_id))

	@router.get("/{subject_id}/check", response_model=ReactionCheckResponse)
	async def check_reaction(
		subject_id: UUID,
		auth_user: AuthenticatedUser = Depends(get_current_user),
	) -> ReactionCheckResponse:
		return await service.check_reaction(auth_user, subject, str(subject_id))

	@router.get("/{subject_id}", response_model=PageResponse[ReactorView])
	async def list_reactors(
		subject_id: UUID,
		page: PageRequest = Depends(page_params(default_limit=20)),
		reaction_type: Optional[ReactionType] = Query(default=None, alias="type"),
		auth_user: AuthenticatedUser = Depends(get_current_user),
	) -> PageResponse[ReactorView]:
		return await service.list_reactors(auth_user, subject, str(subject_id), page, reaction_type)

	return router


post_router = _build_router("/api/reactions", ReactionSubject.POST)
share_router = _build_router("/api/share-reactions", ReactionSubject.SHARE)


@post_router.get("/user/{user_id}/posts", response_model=PageResponse[PostView])
async def list_user_reacted_posts(
	user_id: UUID,
	page: PageRequest = Depends(page_params()),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[PostView]:
	return await service.list_user_reacted_posts(auth_user, str(user_id), page)
