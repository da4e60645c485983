"""Offset pagination helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from bubbly.domain.common.schemas import Pagination


@dataclass(slots=True, frozen=True)
class PageRequest:
	page: int = 1
	limit: int = 10

	def __post_init__(self) -> None:
		if self.page < 1:
			raise ValueError("page must be >= 1")
		if self.limit < 1:
			raise ValueError("limit must be >= 1")

	@property
	def offset(self) -> int:
		return (self.page - 1) * self.limit


def total_pages(total: int, limit: int) -> int:
	return math.ceil(total / limit) if total > 0 else 0


def build_pagination(page: PageRequest, returned: int, total: int) -> Pagination:
	return Pagination(
		current_page=page.page,
		total_pages=total_pages(total, page.limit),
		total=total,
		has_more=page.offset + returned < total,
	)
