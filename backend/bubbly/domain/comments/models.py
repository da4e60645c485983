"""Domain models for comments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from bubbly.domain.feed.models import AuthorSummary

MAX_COMMENT_LENGTH = 500


@dataclass(slots=True)
class Comment:
	id: str
	user_id: str
	content: str
	created_at: datetime
	updated_at: datetime
	post_id: Optional[str] = None
	share_id: Optional[str] = None
	user: Optional[AuthorSummary] = None

	@classmethod
	def from_record(cls, record) -> "Comment":
		user = None
		if record.get("user_username") is not None or record.get("user_full_name") is not None:
			user = AuthorSummary.from_record(record, prefix="user_")
		return cls(
			id=str(record["id"]),
			user_id=str(record["user_id"]),
			content=record["content"],
			created_at=record["created_at"],
			updated_at=record.get("updated_at") or record["created_at"],
			post_id=str(record["post_id"]) if record.get("post_id") else None,
			share_id=str(record["share_id"]) if record.get("share_id") else None,
			user=user,
		)
