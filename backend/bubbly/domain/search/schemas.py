"""Wire DTOs for search."""

from __future__ import annotations

from typing import List

from bubbly.domain.common.schemas import CamelModel
from bubbly.domain.feed.schemas import PostView, UserSummaryView
from bubbly.domain.search.models import UserHit


class UserResult(UserSummaryView):
	is_following: bool = False
	followers_count: int = 0
	posts_count: int = 0

	@classmethod
	def from_hit(cls, hit: UserHit) -> "UserResult":
		return cls(
			id=hit.user.id,
			username=hit.user.username,
			full_name=hit.user.full_name,
			profile_picture=hit.user.profile_picture,
			is_verified=hit.user.is_verified,
			is_following=hit.is_following,
			followers_count=hit.followers_count,
			posts_count=hit.posts_count,
		)


class SearchPagination(CamelModel):
	current_page: int
	total_pages: int
	total_results: int
	has_more: bool


class UserSearchResponse(CamelModel):
	success: bool = True
	data: List[UserResult]
	pagination: SearchPagination


class PostSearchResponse(CamelModel):
	success: bool = True
	data: List[PostView]
	pagination: SearchPagination


class SearchAllData(CamelModel):
	users: List[UserResult]
	posts: List[PostView]


class SearchCounts(CamelModel):
	users: int
	posts: int
	total: int


class SearchAllResponse(CamelModel):
	success: bool = True
	data: SearchAllData
	counts: SearchCounts
