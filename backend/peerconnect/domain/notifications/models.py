"""Notification records and the message templates for each event type."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class NotificationType(str, Enum):
	DISCUSSION = "discussion"
	COMMENT = "comment"
	LIKE = "like"
	MATERIAL = "material"


class NotificationRecord(BaseModel):
	"""A persisted notification; only ``read`` ever changes after insert."""

	id: int
	type: str
	ref_id: Optional[int] = None
	message: str
	created_at: datetime
	read: bool = False

	model_config = ConfigDict(from_attributes=True)

	def to_event(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"type": self.type,
			"ref_id": self.ref_id,
			"message": self.message,
			"created_at": self.created_at.isoformat(),
			"read": False,
		}


def _full_name(first_name: str | None, last_name: str | None) -> str:
	return f"{first_name or 'Unknown'} {last_name or ''}"


def post_created_message(first_name: str | None, last_name: str | None, title: str) -> str:
	return f"📝 {_full_name(first_name, last_name)} created a new post: {title}"


def comment_added_message(first_name: str | None, last_name: str | None) -> str:
	return f"💬 {_full_name(first_name, last_name)} commented on a post"


def post_liked_message(liker_name: str | None) -> str:
	return f"👍 {liker_name or 'Someone'} liked your post"


def material_uploaded_message(title: str) -> str:
	return f"📘 New study material uploaded: {title}"
