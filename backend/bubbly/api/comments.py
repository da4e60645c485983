"""Comment endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from bubbly.api.pagination import page_params
from bubbly.domain.comments import service
from bubbly.domain.comments.schemas import CommentRequest, CommentView
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import DataResponse, MessageResponse, PageResponse
from bubbly.domain.reactions.models import ReactionSubject
from bubbly.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/comments")


@router.post("/post/{post_id}", status_code=status.HTTP_201_CREATED, response_model=DataResponse[CommentView])
async def comment_on_post(
	post_id: UUID,
	payload: CommentRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[CommentView]:
	comment = await service.add_comment(auth_user, ReactionSubject.POST, str(post_id), payload.content)
	return DataResponse[CommentView](data=comment)


@router.get("/post/{post_id}", response_model=PageResponse[CommentView])
async def list_post_comments(
	post_id: UUID,
	page: PageRequest = Depends(page_params(default_limit=20)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[CommentView]:
	return await service.list_comments(auth_user, ReactionSubject.POST, str(post_id), page)


@router.post("/share/{share_id}", status_code=status.HTTP_201_CREATED, response_model=DataResponse[CommentView])
async def comment_on_share(
	share_id: UUID,
	payload: CommentRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[CommentView]:
	comment = await service.add_comment(auth_user, ReactionSubject.SHARE, str(share_id), payload.content)
	return DataResponse[CommentView](data=comment)


@router.get("/share/{share_id}", response_model=PageResponse[CommentView])
async def list_share_comments(
	share_id: UUID,
	page: PageRequest = Depends(page_params(default_limit=20)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[CommentView]:
	return await service.list_comments(auth_user, ReactionSubject.SHARE, str(share_id), page)


@router.put("/{comment_id}", response_model=DataResponse[CommentView])
async def update_comment(
	comment_id: UUID,
	payload: CommentRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[CommentView]:
	return DataResponse[CommentView](data=await service.update_comment(auth_user, str(comment_id), payload.content))


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
	comment_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
	await service.delete_comment(auth_user, str(comment_id))
	return MessageResponse(message="Comment deleted successfully")
