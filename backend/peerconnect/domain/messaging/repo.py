"""Async repository for conversations and messages."""

from __future__ import annotations

import asyncpg

from peerconnect.domain.errors import NotFoundError
from peerconnect.domain.messaging.models import (
	ConversationKey,
	ConversationSummary,
	Message,
	Participant,
)
from peerconnect.infra.postgres import connection


class MessagingRepository:
	async def get_or_create_conversation(self, key: ConversationKey) -> tuple[int, bool]:
		"""Return ``(conversation_id, created)`` for the pair, inserting at most once."""
		async with connection() as conn:
			try:
				row = await conn.fetchrow(
					"""
					INSERT INTO conversations (user_low, user_high)
					VALUES ($1, $2)
					ON CONFLICT (user_low, user_high) DO UPDATE SET user_low = EXCLUDED.user_low
					RETURNING id, (xmax = 0) AS created
					""",
					key.user_low,
					key.user_high,
				)
			except asyncpg.ForeignKeyViolationError as exc:
				raise NotFoundError("Recipient not found") from exc
		return int(row["id"]), bool(row["created"])

	async def get_conversation(self, conversation_id: int) -> ConversationKey | None:
		async with connection() as conn:
			row = await conn.fetchrow(
				"SELECT user_low, user_high FROM conversations WHERE id=$1",
				conversation_id,
			)
		if not row:
			return None
		return ConversationKey(user_low=row["user_low"], user_high=row["user_high"])

	async def list_conversations(self, viewer_id: int) -> list[ConversationSummary]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT c.id AS conversation_id, c.created_at,
					s.stu_id, s.first_name, s.last_name, s.stu_email, s.avatar
				FROM conversations c
				LEFT JOIN student s
					ON s.stu_id = CASE WHEN c.user_low = $1 THEN c.user_high ELSE c.user_low END
				WHERE c.user_low = $1 OR c.user_high = $1
				ORDER BY c.created_at DESC, c.id DESC
				""",
				viewer_id,
			)
		summaries: list[ConversationSummary] = []
		for row in rows:
			participants = []
			if row["stu_id"] is not None:
				participants.append(
					Participant(
						id=row["stu_id"],
						first_name=row["first_name"],
						last_name=row["last_name"],
						email=row["stu_email"],
						avatar=row["avatar"],
					)
				)
			summaries.append(
				ConversationSummary(
					conversation_id=row["conversation_id"],
					created_at=row["created_at"],
					participants=participants,
				)
			)
		return summaries

	async def insert_message(self, *, conversation_id: int, sender_id: int, content: str) -> Message:
		async with connection() as conn:
			try:
				row = await conn.fetchrow(
					"""
					INSERT INTO messages (conversation_id, sender_id, content)
					VALUES ($1, $2, $3)
					RETURNING id, conversation_id, sender_id, content, created_at
					""",
					conversation_id,
					sender_id,
					content,
				)
			except asyncpg.ForeignKeyViolationError as exc:
				raise NotFoundError("Conversation not found") from exc
		return Message(**dict(row))

	async def list_messages(self, conversation_id: int) -> list[Message]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT m.id, m.conversation_id, m.sender_id, m.content, m.created_at,
					s.first_name, s.last_name, s.avatar
				FROM messages m
				LEFT JOIN student s ON m.sender_id = s.stu_id
				WHERE m.conversation_id = $1
				ORDER BY m.created_at ASC, m.id ASC
				""",
				conversation_id,
			)
		return [Message(**dict(row)) for row in rows]
