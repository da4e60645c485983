"""Direct message endpoints."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from bubbly.api.pagination import page_params
from bubbly.domain.chat import service
from bubbly.domain.chat.schemas import (
	ConversationView,
	MarkReadResult,
	MessageView,
	SendMessageRequest,
	UnreadTotalResponse,
)
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.common.schemas import DataResponse, MessageResponse, PageResponse
from bubbly.infra.auth import AuthenticatedUser, get_current_user
from bubbly.settings import settings

router = APIRouter(prefix="/api/messages")


@router.get("/conversations", response_model=DataResponse[List[ConversationView]])
async def list_conversations(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[List[ConversationView]]:
	return DataResponse[List[ConversationView]](data=await service.list_conversations(auth_user))


@router.get("/conversations/user/{other_user_id}", response_model=DataResponse[ConversationView])
async def get_or_create_conversation(
	other_user_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[ConversationView]:
	return DataResponse[ConversationView](data=await service.get_or_create_conversation(auth_user, str(other_user_id)))


@router.get("/conversations/{conversation_id}/messages", response_model=PageResponse[MessageView])
async def list_messages(
	conversation_id: UUID,
	page: PageRequest = Depends(page_params(default_limit=settings.messages_default_limit, max_limit=100)),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PageResponse[MessageView]:
	return await service.list_messages(auth_user, str(conversation_id), page)


@router.post(
	"/conversations/{conversation_id}/messages",
	status_code=status.HTTP_201_CREATED,
	response_model=DataResponse[MessageView],
)
async def send_message(
	conversation_id: UUID,
	payload: SendMessageRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> DataResponse[MessageView]:
	return DataResponse[MessageView](data=await service.send_message(auth_user, str(conversation_id), payload.content))


@router.patch("/conversations/{conversation_id}/read", response_model=MarkReadResult)
async def mark_read(
	conversation_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MarkReadResult:
	return MarkReadResult(marked=await service.mark_read(auth_user, str(conversation_id)))


@router.delete("/conversations/{conversation_id}", response_model=MessageResponse)
async def delete_conversation(
	conversation_id: UUID,
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
	await service.delete_conversation(auth_user, str(conversation_id))
	return MessageResponse(message="Conversation deleted successfully")


@router.get("/unread-count", response_model=UnreadTotalResponse)
async def unread_count(
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> UnreadTotalResponse:
	return UnreadTotalResponse(unread_count=await service.unread_total(auth_user))
