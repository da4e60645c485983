"""Domain models for user notifications."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from bubbly.domain.feed.models import AuthorSummary


class NotificationType(str, Enum):
	FOLLOW = "follow"
	REACTION = "reaction"
	COMMENT = "comment"
	SHARE = "share"


@dataclass(slots=True)
class Notification:
	id: str
	recipient_id: str
	sender_id: str
	type: NotificationType
	content: str
	is_read: bool
	created_at: datetime
	post_id: Optional[str] = None
	share_id: Optional[str] = None
	reaction_type: Optional[str] = None
	sender: Optional[AuthorSummary] = None

	@classmethod
	def from_record(cls, record) -> "Notification":
		sender = None
		if record.get("sender_username") is not None or record.get("sender_full_name") is not None:
			sender = AuthorSummary.from_record(record, prefix="sender_")
		return cls(
			id=str(record["id"]),
			recipient_id=str(record["recipient_id"]),
			sender_id=str(record["sender_id"]),
			type=NotificationType(record["type"]),
			content=record["content"],
			is_read=bool(record["is_read"]),
			created_at=record["created_at"],
			post_id=str(record["post_id"]) if record.get("post_id") else None,
			share_id=str(record["share_id"]) if record.get("share_id") else None,
			reaction_type=record.get("reaction_type"),
			sender=sender,
		)
