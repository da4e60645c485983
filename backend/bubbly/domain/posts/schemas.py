"""Pydantic schemas for posts and shares."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.models import MAX_POST_FILES, Audience
from bubbly.domain.feed.schemas import ShareView, UserSummaryView


class PostCreateRequest(CamelModel):
	content: Optional[str] = None
	audience: Audience = Audience.PUBLIC
	files: List[str] = Field(default_factory=list, max_length=MAX_POST_FILES)


class PostUpdateRequest(CamelModel):
	content: Optional[str] = None
	audience: Optional[Audience] = None
	files: Optional[List[str]] = Field(default=None, max_length=MAX_POST_FILES)


class ShareCreateRequest(CamelModel):
	share_caption: Optional[str] = Field(default=None, max_length=500)
	audience: Audience = Audience.PUBLIC


class ShareUpdateRequest(CamelModel):
	share_caption: Optional[str] = Field(default=None, max_length=500)
	audience: Optional[Audience] = None


class ShareResult(CamelModel):
	share: ShareView
	share_count: int


class ShareResponse(CamelModel):
	success: bool = True
	message: str
	data: ShareResult


class UnshareResponse(CamelModel):
	success: bool = True
	message: str
	share_count: int


class SharerView(CamelModel):
	share_id: str
	user: UserSummaryView
	share_caption: Optional[str] = None
	audience: Audience
	created_at: datetime
	is_following: bool = False


class CheckSharedResponse(CamelModel):
	success: bool = True
	shared: bool
