"""Authentication helpers for FastAPI endpoints and socket handshakes.

Credentials are issued elsewhere; this module only verifies them:
- Bearer JWT (HS256, issuer/audience checked) from the Authorization header,
  the ``peerconnect_auth`` cookie, or a ``token`` query param for download links.
- In development, an ``X-User-Id`` header is accepted for local tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from peerconnect.infra import jwt as jwt_helper
from peerconnect.settings import settings

AUTH_COOKIE = "peerconnect_auth"


@dataclass(slots=True)
class AuthenticatedUser:
	id: int
	email: Optional[str] = None
	student_number: Optional[str] = None


_bearer_scheme = HTTPBearer(auto_error=False)


def _parse_viewer_id(raw: object) -> int:
	try:
		viewer_id = int(str(raw).strip())
	except (TypeError, ValueError):
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_token") from None
	if viewer_id <= 0:
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_token")
	return viewer_id


def verify_access_token(token: str) -> AuthenticatedUser:
	"""Decode and validate an access JWT and return an AuthenticatedUser."""
	try:
		payload = jwt_helper.decode_access(token)
	except Exception:
		# Normalise all decode failures to invalid_token for the API surface
		raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid_token") from None

	email = payload.get("email")
	number = payload.get("studentNumber") or payload.get("student_number")
	return AuthenticatedUser(
		id=_parse_viewer_id(payload.get("sub")),
		email=str(email) if email is not None else None,
		student_number=str(number) if number is not None else None,
	)


async def get_current_user(
	request: Request,
	x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
	credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> AuthenticatedUser:
	"""Resolve the authenticated viewer or fail with 401."""
	if credentials and credentials.scheme.lower() == "bearer":
		return verify_access_token(credentials.credentials)

	cookie_token = request.cookies.get(AUTH_COOKIE)
	if cookie_token:
		return verify_access_token(cookie_token)

	query_token = (request.query_params.get("token") or "").strip()
	if query_token:
		return verify_access_token(query_token)

	if settings.is_dev() and x_user_id:
		return AuthenticatedUser(id=_parse_viewer_id(x_user_id))

	raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="no_token")


def _header(scope: dict, name: str) -> Optional[str]:
	target = name.encode().lower()
	for key, value in scope.get("headers", []):
		if key.lower() == target:
			return value.decode()
	return None


def resolve_socket_user(environ: dict, auth: Optional[dict] = None) -> AuthenticatedUser:
	"""Authenticate a Socket.IO handshake; raises ConnectionRefusedError on failure."""
	scope = environ.get("asgi.scope", environ)
	auth_payload = auth or environ.get("auth") or scope.get("auth") or {}
	token = auth_payload.get("token")
	if not token:
		authorization = _header(scope, "authorization") or ""
		if authorization.lower().startswith("bearer "):
			token = authorization.split(" ", 1)[1].strip()
	try:
		if token:
			return verify_access_token(token)
		user_id = auth_payload.get("userId") or _header(scope, "x-user-id")
		if settings.is_dev() and user_id:
			return AuthenticatedUser(id=_parse_viewer_id(user_id))
	except HTTPException as exc:
		raise ConnectionRefusedError(exc.detail) from None
	raise ConnectionRefusedError("missing credentials")
