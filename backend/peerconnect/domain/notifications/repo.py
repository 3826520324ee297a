"""Async repository for the global notification log."""

from __future__ import annotations

from peerconnect.domain.notifications.models import NotificationRecord
from peerconnect.infra.postgres import connection

_COLUMNS = "id, type, ref_id, message, created_at, is_read AS read"


class NotificationsRepository:
	async def insert(self, *, type: str, ref_id: int | None, message: str) -> NotificationRecord:
		async with connection() as conn:
			row = await conn.fetchrow(
				f"""
				INSERT INTO notifications (type, ref_id, message)
				VALUES ($1, $2, $3)
				RETURNING {_COLUMNS}
				""",
				type,
				ref_id,
				message,
			)
		return NotificationRecord.model_validate(dict(row))

	async def list_recent(self, *, limit: int = 100) -> list[NotificationRecord]:
		async with connection() as conn:
			rows = await conn.fetch(
				f"SELECT {_COLUMNS} FROM notifications ORDER BY created_at DESC, id DESC LIMIT $1",
				limit,
			)
		return [NotificationRecord.model_validate(dict(row)) for row in rows]

	async def set_read(self, notification_id: int, read: bool) -> NotificationRecord | None:
		async with connection() as conn:
			row = await conn.fetchrow(
				f"UPDATE notifications SET is_read=$2 WHERE id=$1 RETURNING {_COLUMNS}",
				notification_id,
				read,
			)
		return NotificationRecord.model_validate(dict(row)) if row else None

	async def mark_all_read(self) -> int:
		async with connection() as conn:
			rows = await conn.fetch("UPDATE notifications SET is_read=TRUE WHERE is_read=FALSE RETURNING id")
		return len(rows)
