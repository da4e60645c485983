"""Domain models for one-to-one conversations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from bubbly.domain.feed.models import AuthorSummary

LAST_MESSAGE_PREVIEW_LENGTH = 100


@dataclass(frozen=True, slots=True)
class ConversationKey:
	"""Canonical participant pair; ``user1_id`` sorts before ``user2_id``."""

	user1_id: str
	user2_id: str

	@classmethod
	def from_participants(cls, a: str, b: str) -> "ConversationKey":
		first, second = sorted((str(a), str(b)))
		return cls(first, second)

	@property
	def participants(self) -> Tuple[str, str]:
		return (self.user1_id, self.user2_id)


@dataclass(slots=True)
class Conversation:
	id: str
	key: ConversationKey
	last_message: Optional[str]
	last_message_at: Optional[datetime]
	user1_unread: int
	user2_unread: int
	created_at: datetime
	user1: Optional[AuthorSummary] = None
	user2: Optional[AuthorSummary] = None

	@classmethod
	def from_record(cls, record) -> "Conversation":
		user1 = AuthorSummary.from_record(record, prefix="u1_") if record.get("u1_id") else None
		user2 = AuthorSummary.from_record(record, prefix="u2_") if record.get("u2_id") else None
		return cls(
			id=str(record["id"]),
			key=ConversationKey(str(record["user1_id"]), str(record["user2_id"])),
			last_message=record.get("last_message"),
			last_message_at=record.get("last_message_at"),
			user1_unread=int(record.get("user1_unread") or 0),
			user2_unread=int(record.get("user2_unread") or 0),
			created_at=record["created_at"],
			user1=user1,
			user2=user2,
		)

	def has_participant(self, user_id: str) -> bool:
		return user_id in self.key.participants

	def other_id(self, user_id: str) -> str:
		return self.key.user2_id if user_id == self.key.user1_id else self.key.user1_id

	def other_user(self, user_id: str) -> Optional[AuthorSummary]:
		return self.user2 if user_id == self.key.user1_id else self.user1

	def unread_for(self, user_id: str) -> int:
		return self.user1_unread if user_id == self.key.user1_id else self.user2_unread


@dataclass(slots=True)
class Message:
	id: str
	conversation_id: str
	sender_id: str
	recipient_id: str
	content: str
	is_read: bool
	created_at: datetime
	sender: Optional[AuthorSummary] = None

	@classmethod
	def from_record(cls, record) -> "Message":
		sender = None
		if record.get("sender_username") is not None or record.get("sender_full_name") is not None:
			sender = AuthorSummary.from_record(record, prefix="sender_")
		return cls(
			id=str(record["id"]),
			conversation_id=str(record["conversation_id"]),
			sender_id=str(record["sender_id"]),
			recipient_id=str(record["recipient_id"]),
			content=record["content"],
			is_read=bool(record["is_read"]),
			created_at=record["created_at"],
			sender=sender,
		)
