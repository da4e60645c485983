"""Search result models."""

from __future__ import annotations

from dataclasses import dataclass

from bubbly.domain.feed.models import AuthorSummary

MAX_QUERY_LENGTH = 100


@dataclass(slots=True)
class UserHit:
	user: AuthorSummary
	followers_count: int
	posts_count: int
	is_following: bool

	@classmethod
	def from_record(cls, record) -> "UserHit":
		return cls(
			user=AuthorSummary.from_record(record, prefix="user_"),
			followers_count=int(record["followers_count"]),
			posts_count=int(record["posts_count"]),
			is_following=bool(record["is_following"]),
		)


def like_pattern(term: str) -> str:
	"""Substring ILIKE pattern with ``%``, ``_`` and ``\\`` taken literally."""
	escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
	return f"%{escaped}%"
