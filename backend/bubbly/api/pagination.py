from __future__ import annotations

from typing import Optional

from fastapi import Query

from bubbly.domain.common.paging import PageRequest
from bubbly.settings import settings


def page_params(default_limit: Optional[int] = None, max_limit: Optional[int] = None):
	"""FastAPI dependency parsing ``?page=&limit=`` into a PageRequest.

	Non-numeric, non-positive or oversized values are rejected with 422.
	"""
	default = default_limit or settings.feed_default_limit
	ceiling = max(max_limit or settings.feed_max_limit, default)

	async def _dependency(
		page: int = Query(default=1, ge=1),
		limit: int = Query(default=default, ge=1, le=ceiling),
	) -> PageRequest:
		return PageRequest(page=page, limit=limit)

	return _dependency
