"""Domain models for the directed follow graph."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from bubbly.domain.feed.models import AuthorSummary


@dataclass(slots=True)
class FollowEdge:
	"""``user`` is the other end of the edge; ``followed_at`` is when it was created."""

	user: AuthorSummary
	followed_at: datetime

	@classmethod
	def from_record(cls, record) -> "FollowEdge":
		return cls(
			user=AuthorSummary.from_record(record, prefix="user_"),
			followed_at=record["followed_at"],
		)


@dataclass(slots=True)
class FollowCounts:
	followers: int
	following: int
