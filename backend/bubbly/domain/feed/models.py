"""Domain models for posts, shares and the viewer's follow graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional


class Audience(str, Enum):
	"""Who may see a post or a share. Values are the wire values."""

	PUBLIC = "Public"
	FOLLOWING = "Following"
	ONLY_ME = "OnlyMe"


MAX_POST_FILES = 10


@dataclass(slots=True)
class AuthorSummary:
	id: str
	username: Optional[str] = None
	full_name: Optional[str] = None
	profile_picture: Optional[str] = None
	is_verified: bool = False

	@classmethod
	def from_record(cls, record, prefix: str = "") -> "AuthorSummary":
		return cls(
			id=str(record[f"{prefix}id"]),
			username=record.get(f"{prefix}username"),
			full_name=record.get(f"{prefix}full_name"),
			profile_picture=record.get(f"{prefix}profile_picture"),
			is_verified=bool(record.get(f"{prefix}is_verified") or False),
		)


@dataclass(slots=True)
class Post:
	id: str
	author_id: str
	content: Optional[str]
	files: tuple[str, ...]
	audience: Audience
	created_at: datetime
	updated_at: datetime
	author: Optional[AuthorSummary] = None
	reaction_count: int = 0
	comment_count: int = 0
	share_count: int = 0
	viewer_reaction: Optional[str] = None

	@classmethod
	def from_record(cls, record, prefix: str = "") -> "Post":
		author = None
		if record.get(f"{prefix}author_username") is not None or record.get(f"{prefix}author_full_name") is not None:
			author = AuthorSummary.from_record(
				{
					"id": record[f"{prefix}author_id"],
					"username": record.get(f"{prefix}author_username"),
					"full_name": record.get(f"{prefix}author_full_name"),
					"profile_picture": record.get(f"{prefix}author_profile_picture"),
					"is_verified": record.get(f"{prefix}author_is_verified"),
				}
			)
		return cls(
			id=str(record[f"{prefix}id"]),
			author_id=str(record[f"{prefix}author_id"]),
			content=record.get(f"{prefix}content"),
			files=tuple(record.get(f"{prefix}files") or ()),
			audience=Audience(record[f"{prefix}audience"]),
			created_at=record[f"{prefix}created_at"],
			updated_at=record.get(f"{prefix}updated_at") or record[f"{prefix}created_at"],
			author=author,
			reaction_count=int(record.get(f"{prefix}reaction_count") or 0),
			comment_count=int(record.get(f"{prefix}comment_count") or 0),
			share_count=int(record.get(f"{prefix}share_count") or 0),
			viewer_reaction=record.get(f"{prefix}viewer_reaction"),
		)


@dataclass(slots=True)
class Share:
	"""A user's re-publication of a post. ``post`` is None once the post is gone."""

	id: str
	sharer_id: str
	post_id: str
	post: Optional[Post]
	caption: Optional[str]
	audience: Audience
	created_at: datetime
	updated_at: datetime
	sharer: Optional[AuthorSummary] = None
	reaction_count: int = 0
	comment_count: int = 0
	viewer_reaction: Optional[str] = None

	@classmethod
	def from_record(cls, record) -> "Share":
		post = Post.from_record(record, prefix="p_") if record.get("p_id") is not None else None
		sharer = None
		if record.get("sharer_username") is not None or record.get("sharer_full_name") is not None:
			sharer = AuthorSummary.from_record(record, prefix="sharer_")
		return cls(
			id=str(record["id"]),
			sharer_id=str(record["sharer_id"]),
			post_id=str(record["post_id"]),
			post=post,
			caption=record.get("caption"),
			audience=Audience(record["audience"]),
			created_at=record["created_at"],
			updated_at=record.get("updated_at") or record["created_at"],
			sharer=sharer,
			reaction_count=int(record.get("reaction_count") or 0),
			comment_count=int(record.get("comment_count") or 0),
			viewer_reaction=record.get("viewer_reaction"),
		)


@dataclass(slots=True, frozen=True)
class ViewerContext:
	"""The viewer's identity and both directions of their follow graph."""

	viewer_id: str
	following_ids: frozenset[str] = field(default_factory=frozenset)
	follower_ids: frozenset[str] = field(default_factory=frozenset)

	@classmethod
	def build(
		cls,
		viewer_id: str,
		following_ids: Iterable[str] = (),
		follower_ids: Iterable[str] = (),
	) -> "ViewerContext":
		return cls(
			viewer_id=str(viewer_id),
			following_ids=frozenset(str(uid) for uid in following_ids),
			follower_ids=frozenset(str(uid) for uid in follower_ids),
		)

	@classmethod
	def for_author(
		cls,
		viewer_id: str,
		author_id: str,
		*,
		author_follows_viewer: bool,
		viewer_follows_author: bool = False,
	) -> "ViewerContext":
		"""Context holding only the edges between the viewer and one author."""
		return cls.build(
			viewer_id,
			following_ids=(author_id,) if viewer_follows_author else (),
			follower_ids=(author_id,) if author_follows_viewer else (),
		)

	def follows(self, user_id: str) -> bool:
		return user_id in self.following_ids

	def is_followed_by(self, user_id: str) -> bool:
		return user_id in self.follower_ids
