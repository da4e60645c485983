"""Reaction types and the add / replace / toggle-off rule."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from bubbly.domain.feed.models import AuthorSummary


class ReactionType(str, Enum):
	LIKE = "Like"
	HEART = "Heart"
	LAUGHING = "Laughing"
	WOW = "Wow"
	SAD = "Sad"
	ANGRY = "Angry"


class ReactionSubject(str, Enum):
	POST = "post"
	SHARE = "share"


class ReactionOutcome(str, Enum):
	ADDED = "added"
	UPDATED = "updated"
	REMOVED = "removed"


def resolve_reaction(existing: Optional[ReactionType], requested: ReactionType) -> ReactionOutcome:
	"""Reacting again with the same type removes the reaction."""
	if existing is None:
		return ReactionOutcome.ADDED
	if existing == requested:
		return ReactionOutcome.REMOVED
	return ReactionOutcome.UPDATED


@dataclass(slots=True)
class Reaction:
	subject_id: str
	user_id: str
	reaction_type: ReactionType
	created_at: datetime
	user: Optional[AuthorSummary] = None

	@classmethod
	def from_record(cls, record) -> "Reaction":
		user = None
		if record.get("user_username") is not None or record.get("user_full_name") is not None:
			user = AuthorSummary.from_record(record, prefix="user_")
		return cls(
			subject_id=str(record["subject_id"]),
			user_id=str(record["user_id"]),
			reaction_type=ReactionType(record["reaction_type"]),
			created_at=record["created_at"],
			user=user,
		)
