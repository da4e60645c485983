"""Share endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from bubbly.api.pagination import page_params
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import DataResponse, PageResponse
from bubbly.domain.feed.schemas import ShareView
from bubbly.domain.posts import service
from bubbly.domain.posts.schemas import (
	CheckSharedResponse,
	ShareCreateRequest,
	ShareResponse,
	SharerView,
	ShareUpdateRequest,
	UnshareResponse,
)
from bubbly.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/shares")


@router.post("/post/{post_id}", status_code=status.HTTP_201_CREATED, response_model=ShareResponse)
async def share_post(
	post_id: UUID,
	payload: ShareCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> ShareResponse:
	result = await service.share_post(auth_user, str(post_id), payload)
	return ShareResponse(message="Post shared successfully", data=result)


@router.get("/user/{user_id}", response_model=PageResponse[ShareView])
async def list_user_shares(
	user_id: UUID,
	page: PageRequest = Depends(page_params()),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[ShareView]:
	return await service.list_user_shares(auth_user, str(user_id), page)


@router.get("/{post_id}/check", response_model=CheckSharedResponse)
async def check_shared(
	post_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> CheckSharedResponse:
	return CheckSharedResponse(shared=await service.check_shared(auth_user, str(post_id)))


@router.get("/{post_id}", response_model=PageResponse[SharerView])
async def list_post_shares(
	post_id: UUID,
	page: PageRequest = Depends(page_params(default_limit=20)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[SharerView]:
	return await service.list_post_shares(auth_user, str(post_id), page)


@router.delete("/{post_id}", response_model=UnshareResponse)
async def unshare_post(
	post_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> UnshareResponse:
	count = await service.unshare_post(auth_user, str(post_id))
	return UnshareResponse(message="Post unshared successfully", share_count=count)


@router.put("/{share_id}", response_model=DataResponse[ShareView])
async def update_share(
	share_id: UUID,
	payload: ShareUpdateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[ShareView]:
	return DataResponse[ShareView](data=await service.update_share(auth_user, str(share_id), payload))
