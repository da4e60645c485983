"""Global error handlers rendering the ``{success: false, error}`` envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bubbly.api.request_id import get_request_id
from bubbly.domain.common.exceptions import Conflict, DomainError, Forbidden, NotFound, RateLimited, ValidationFailed

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
	(ValidationFailed, status.HTTP_400_BAD_REQUEST),
	(Forbidden, status.HTTP_403_FORBIDDEN),
	(NotFound, status.HTTP_404_NOT_FOUND),
	(Conflict, status.HTTP_409_CONFLICT),
	(RateLimited, status.HTTP_429_TOO_MANY_REQUESTS),
)


def status_for(exc: DomainError) -> int:
	for error_type, code in _STATUS_BY_ERROR:
		if isinstance(exc, error_type):
			return code
	return status.HTTP_400_BAD_REQUEST


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(DomainError)
	async def domain_exc_handler(request: Request, exc: DomainError):  # type: ignore[override]
		payload = {
			"success": False,
			"error": exc.message,
			"code": exc.reason,
			"request_id": get_request_id(request),
		}
		return JSONResponse(status_code=status_for(exc), content=payload)

	@app.exception_handler(StarletteHTTPException)
	async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
		payload = {"success": False, "error": exc.detail, "request_id": get_request_id(request)}
		return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))

	@app.exception_handler(RequestValidationError)
	async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
		payload = {
			"success": False,
			"error": "validation_error",
			"errors": jsonable_encoder(exc.errors()),
			"request_id": get_request_id(request),
		}
		return JSONResponse(status_code=422, content=payload)

	@app.exception_handler(Exception)
	async def unhandled_exc_handler(request: Request, exc: Exception):  # type: ignore[override]
		logger.exception("unhandled error", extra={"path": request.url.path, "method": request.method})
		payload = {"success": False, "error": "Internal server error", "request_id": get_request_id(request)}
		return JSONResponse(status_code=500, content=payload)
