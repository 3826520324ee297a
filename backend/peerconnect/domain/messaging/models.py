"""Domain models for direct messaging."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Tuple


@dataclass(slots=True)
class ConversationKey:
	"""Canonical (low, high) ordering of a two-person conversation."""

	user_low: int
	user_high: int

	@classmethod
	def from_participants(cls, user_one: int, user_two: int) -> "ConversationKey":
		low, high = sorted((int(user_one), int(user_two)))
		return cls(user_low=low, user_high=high)

	def participants(self) -> Tuple[int, int]:
		return (self.user_low, self.user_high)

	def other(self, user_id: int) -> int:
		return self.user_high if int(user_id) == self.user_low else self.user_low


@dataclass(slots=True)
class Participant:
	id: int
	first_name: Optional[str] = None
	last_name: Optional[str] = None
	email: Optional[str] = None
	avatar: Optional[str] = None

	def to_dict(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"first_name": self.first_name,
			"last_name": self.last_name,
			"email": self.email,
			"avatar": self.avatar,
		}


@dataclass(slots=True)
class ConversationSummary:
	conversation_id: int
	created_at: datetime
	participants: list[Participant] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		return {
			"conversation_id": self.conversation_id,
			"created_at": self.created_at.isoformat(),
			"participants": [participant.to_dict() for participant in self.participants],
		}


@dataclass(slots=True)
class Message:
	id: int
	conversation_id: int
	sender_id: int
	content: str
	created_at: datetime
	first_name: Optional[str] = None
	last_name: Optional[str] = None
	avatar: Optional[str] = None

	def to_event(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"conversation_id": self.conversation_id,
			"sender_id": self.sender_id,
			"content": self.content,
			"created_at": self.created_at.isoformat(),
		}

	def to_dict(self) -> dict[str, Any]:
		payload = self.to_event()
		payload.update({"first_name": self.first_name, "last_name": self.last_name, "avatar": self.avatar})
		return payload
