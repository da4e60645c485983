"""Base pydantic models shared by the API surface."""

from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
	"""Snake_case in Python, camelCase on the wire."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
	current_page: int
	total_pages: int
	total: int
	has_more: bool


class DataResponse(CamelModel, Generic[T]):
	success: bool = True
	data: T


class PageResponse(CamelModel, Generic[T]):
	success: bool = True
	data: List[T]
	pagination: Pagination


class MessageResponse(CamelModel):
	success: bool = True
	message: str
