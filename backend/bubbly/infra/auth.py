"""Authentication helpers for FastAPI endpoints and socket handshakes.

- Bearer access JWTs (HS256) signed with settings.secret_key.
- Dev-only X-User-Id header fallback for local tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bubbly.infra import jwt as jwt_helper
from bubbly.settings import settings


@dataclass(slots=True)
class AuthenticatedUser:
	id: str
	username: Optional[str] = None
	full_name: Optional[str] = None


_bearer_scheme = HTTPBearer(auto_error=False)


class InvalidToken(Exception):
	"""Raised when a presented token cannot be trusted."""


def decode_user_token(token: str) -> AuthenticatedUser:
	"""Decode an access JWT into an AuthenticatedUser or raise InvalidToken."""
	token = (token or "").strip()
	if not token:
		raise InvalidToken("empty_token")
	try:
		payload = jwt_helper.decode_access(token)
	except Exception as exc:
		raise InvalidToken("invalid_token") from exc
	sub = str(payload.get("sub") or "").strip()
	if not sub:
		raise InvalidToken("invalid_token")
	username = payload.get("username")
	full_name = payload.get("name") or payload.get("full_name")
	return AuthenticatedUser(
		id=sub,
		username=str(username) if username is not None else None,
		full_name=str(full_name) if full_name is not None else None,
	)


def verify_access_jwt(token: str) -> AuthenticatedUser:
	try:
		return decode_user_token(token)
	except InvalidToken:
		# Normalise all decode failures to invalid_token for the API surface
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_token") from None


async def get_current_user(
	x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
	credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> AuthenticatedUser:
	"""Resolve the authenticated user.

	In development we allow the X-User-Id header. In all other environments a
	valid Bearer JWT is required.
	"""
	if credentials and credentials.scheme.lower() == "bearer":
		return verify_access_jwt(credentials.credentials)

	if settings.is_dev() and x_user_id:
		return AuthenticatedUser(id=x_user_id.strip())

	raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_token")
