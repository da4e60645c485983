"""Home feed and post endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from bubbly.api.pagination import page_params
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import DataResponse, MessageResponse, PageResponse
from bubbly.domain.feed import service as feed_service
from bubbly.domain.feed.schemas import FeedResponse, PostView
from bubbly.domain.posts import service
from bubbly.domain.posts.schemas import PostCreateRequest, PostUpdateRequest
from bubbly.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/posts")


@router.get("", response_model=FeedResponse)
async def get_feed(
	page: PageRequest = Depends(page_params()),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> FeedResponse:
	return await feed_service.get_feed(auth_user, page)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=DataResponse[PostView])
async def create_post(
	payload: PostCreateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[PostView]:
	return DataResponse[PostView](data=await service.create_post(auth_user, payload))


@router.get("/user/{user_id}", response_model=PageResponse[PostView])
async def list_user_posts(
	user_id: UUID,
	page: PageRequest = Depends(page_params()),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[PostView]:
	return await service.list_user_posts(auth_user, str(user_id), page)


@router.get("/{post_id}", response_model=DataResponse[PostView])
async def get_post(
	post_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[PostView]:
	return DataResponse[PostView](data=await service.get_post(auth_user, str(post_id)))


@router.put("/{post_id}", response_model=DataResponse[PostView])
async def update_post(
	post_id: UUID,
	payload: PostUpdateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[PostView]:
	return DataResponse[PostView](data=await service.update_post(auth_user, str(post_id), payload))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
	post_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
	await service.delete_post(auth_user, str(post_id))
	return MessageResponse(message="Post deleted successfully")
