"""Global error handlers producing one JSON envelope with the request id."""

from __future__ import annotations

import logging

import asyncpg
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from peerconnect.api.request_id import get_request_id
from peerconnect.domain.errors import ModerationRejected, PeerConnectError, StorageError

logger = logging.getLogger(__name__)


def _envelope(request: Request, status_code: int, message: str, detail: object, **extra: object) -> JSONResponse:
	payload = {
		"success": False,
		"message": message,
		"detail": detail,
		"request_id": get_request_id(request),
	}
	payload.update(extra)
	return JSONResponse(status_code=status_code, content=payload)


def _first_field(exc: RequestValidationError) -> str | None:
	for error in exc.errors():
		loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
		if loc:
			return ".".join(loc)
	return None


def install_error_handlers(app: FastAPI) -> None:
	@app.exception_handler(ModerationRejected)
	async def moderation_handler(request: Request, exc: ModerationRejected):  # type: ignore[override]
		return _envelope(
			request,
			exc.status_code,
			exc.detail,
			"moderation_rejected",
			reason=exc.reason,
			categories=exc.categories,
		)

	@app.exception_handler(PeerConnectError)
	async def domain_handler(request: Request, exc: PeerConnectError):  # type: ignore[override]
		if isinstance(exc, StorageError):
			logger.error("storage_error", exc_info=exc)
			return _envelope(request, exc.status_code, "Server error", exc.detail)
		extra = {}
		field = getattr(exc, "field", None)
		if field:
			extra["field"] = field
		return _envelope(request, exc.status_code, exc.detail, exc.detail, **extra)

	@app.exception_handler(StarletteHTTPException)
	async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
		return _envelope(request, exc.status_code, str(exc.detail), exc.detail)

	@app.exception_handler(RequestValidationError)
	async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
		field = _first_field(exc)
		message = f"Invalid or missing field: {field}" if field else "Invalid request"
		return _envelope(request, 400, message, "validation_error", field=field)

	@app.exception_handler(asyncpg.PostgresError)
	async def postgres_exc_handler(request: Request, exc: asyncpg.PostgresError):  # type: ignore[override]
		logger.error("storage_error", exc_info=exc)
		return _envelope(request, 500, "Server error", "storage_error")

	@app.exception_handler(asyncpg.InterfaceError)
	async def interface_exc_handler(request: Request, exc: asyncpg.InterfaceError):  # type: ignore[override]
		logger.error("storage_error", exc_info=exc)
		return _envelope(request, 500, "Server error", "storage_error")
