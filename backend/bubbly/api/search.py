"""Search endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from bubbly.api.pagination import page_params
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.search import service
from bubbly.domain.search.schemas import PostSearchResponse, SearchAllResponse, UserSearchResponse
from bubbly.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/api/search")


@router.get("/users", response_model=UserSearchResponse)
async def search_users(
	q: Optional[str] = Query(default=None),
	page: PageRequest = Depends(page_params()),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> UserSearchResponse:
	return await service.search_users(auth_user, q, page)


@router.get("/posts", response_model=PostSearchResponse)
async def search_posts(
	q: Optional[str] = Query(default=None),
	page: PageRequest = Depends(page_params()),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> PostSearchResponse:
	return await service.search_posts(auth_user, q, page)


@router.get("/all", response_model=SearchAllResponse)
async def search_all(
	q: Optional[str] = Query(default=None),
	limit: int = Query(default=5, ge=1, le=20),
	auth_user: AuthenticatedUser = Depends(get_current_user),
) -> SearchAllResponse:
	return await service.search_all(auth_user, q, limit)
