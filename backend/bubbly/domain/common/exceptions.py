"""Domain-level exceptions shared by every Bubbly feature."""

from __future__ import annotations


class DomainError(Exception):
	"""Base class for errors surfaced to API clients.

	``reason`` is a stable machine code, ``message`` is the human readable text.
	"""

	reason: str = "unknown"
	message: str = "Request failed"

	def __init__(self, message: str | None = None, *, reason: str | None = None) -> None:
		if message:
			self.message = message
		if reason:
			self.reason = reason
		super().__init__(self.message)


class ValidationFailed(DomainError):
	reason = "invalid_request"
	message = "Invalid request"


class Forbidden(DomainError):
	reason = "forbidden"
	message = "Not allowed"


class NotFound(DomainError):
	reason = "not_found"
	message = "Not found"


class Conflict(DomainError):
	reason = "conflict"
	message = "Already exists"


class RateLimited(DomainError):
	reason = "rate_limited"
	message = "Too many requests"
