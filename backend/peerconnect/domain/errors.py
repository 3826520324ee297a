"""Domain exceptions shared by every PeerConnect service."""

from __future__ import annotations

from fastapi import status


class PeerConnectError(Exception):
	"""Base class for domain errors surfaced to API callers."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "peerconnect_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class ValidationError(PeerConnectError):
	"""Raised for missing or malformed input not caught by schema validation."""

	status_code = status.HTTP_400_BAD_REQUEST
	detail = "validation_error"

	def __init__(self, detail: str | None = None, *, field: str | None = None) -> None:
		super().__init__(detail)
		self.field = field


class ForbiddenError(PeerConnectError):
	status_code = status.HTTP_403_FORBIDDEN
	detail = "forbidden"


class NotFoundError(PeerConnectError):
	"""Thrown when a referenced entity is missing."""

	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class ConflictError(PeerConnectError):
	status_code = status.HTTP_409_CONFLICT
	detail = "conflict"


class UpstreamUnavailable(PeerConnectError):
	"""Raised when an external collaborator (the classifier) cannot answer."""

	status_code = status.HTTP_503_SERVICE_UNAVAILABLE
	detail = "upstream_unavailable"


class StorageError(PeerConnectError):
	status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
	detail = "storage_error"


class ModerationRejected(PeerConnectError):
	"""Raised when the moderation gate refuses a post."""

	status_code = status.HTTP_400_BAD_REQUEST
	detail = "Post rejected by moderation"

	def __init__(self, reason: str, categories: list[str] | None = None) -> None:
		super().__init__(self.detail)
		self.reason = reason
		self.categories = list(categories or [])
