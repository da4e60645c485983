"""Pydantic schemas for follows."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.schemas import UserSummaryView


class FollowEdgeView(CamelModel):
	id: str
	username: Optional[str] = None
	full_name: Optional[str] = None
	profile_picture: Optional[str] = None
	is_verified: bool = False
	is_following: bool = False
	followed_at: datetime


class FollowStatus(CamelModel):
	is_following: bool
	followers_count: int
	following_count: int


class FollowStatusResponse(CamelModel):
	success: bool = True
	data: FollowStatus


class SuggestionView(UserSummaryView):
	followers_count: int = 0
