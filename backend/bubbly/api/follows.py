"""Follow graph endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from bubbly.api.pagination import page_params
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import DataResponse, PageResponse
from bubbly.domain.social import service
from bubbly.domain.social.schemas import FollowEdgeView, FollowStatusResponse, SuggestionView
from bubbly.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/follow")


@router.get("/suggestions/users", response_model=DataResponse[List[SuggestionView]])
async def suggestions(
	limit: int = Query(default=5, ge=1, le=50),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[List[SuggestionView]]:
	return DataResponse[List[SuggestionView]](data=await service.suggestions(auth_user, limit))


@router.post("/{user_id}", status_code=status.HTTP_201_CREATED, response_model=FollowStatusResponse)
async def follow(
	user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FollowStatusResponse:
	return FollowStatusResponse(data=await service.follow(auth_user, str(user_id)))


@router.delete("/{user_id}", response_model=FollowStatusResponse)
async def unfollow(
	user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FollowStatusResponse:
	return FollowStatusResponse(data=await service.unfollow(auth_user, str(user_id)))


@router.get("/{user_id}/status", response_model=FollowStatusResponse)
async def follow_status(
	user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FollowStatusResponse:
	return FollowStatusResponse(data=await service.status(auth_user, str(user_id)))


@router.get("/{user_id}/followers", response_model=PageResponse[FollowEdgeView])
async def followers(
	user_id: UUID,
	page: PageRequest = Depends(page_params(default_limit=20)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[FollowEdgeView]:
	return await service.followers(auth_user, str(user_id), page)


@router.get("/{user_id}/following", response_model=PageResponse[FollowEdgeView])
async def following(
	user_id: UUID,
	page: PageRequest = Depends(page_params(default_limit=20)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[FollowEdgeView]:
	return await service.following(auth_user, str(user_id), page)
