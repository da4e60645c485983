"""Pydantic schemas for reactions."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.schemas import UserSummaryView
from bubbly.domain.reactions.models import ReactionType


class ReactionRequest(CamelModel):
	reaction_type: ReactionType


class ReactionSummary(CamelModel):
	reacted: bool
	reaction_type: Optional[ReactionType] = None
	total_reactions: int
	reaction_counts: Dict[str, int]


class ReactionToggleResponse(CamelModel):
	success: bool = True
	message: str
	data: ReactionSummary


class ReactorView(CamelModel):
	user: UserSummaryView
	reaction_type: ReactionType
	created_at: datetime
	is_following: bool = False


class ReactionCheckResponse(CamelModel):
	success: bool = True
	reacted: bool
	reaction_type: Optional[ReactionType] = None
