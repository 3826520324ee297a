"""Read-side notification management."""

from __future__ import annotations

from peerconnect.domain.errors import NotFoundError
from peerconnect.domain.notifications.models import NotificationRecord
from peerconnect.domain.notifications.repo import NotificationsRepository


class NotificationService:
	def __init__(self, repository: NotificationsRepository | None = None) -> None:
		self.repo = repository or NotificationsRepository()

	async def list_notifications(self) -> list[NotificationRecord]:
		return await self.repo.list_recent()

	async def mark_read(self, notification_id: int) -> NotificationRecord:
		return await self._set_read(notification_id, True)

	async def mark_unread(self, notification_id: int) -> NotificationRecord:
		return await self._set_read(notification_id, False)

	async def mark_all_read(self) -> int:
		return await self.repo.mark_all_read()

	async def _set_read(self, notification_id: int, read: bool) -> NotificationRecord:
		record = await self.repo.set_read(notification_id, read)
		if record is None:
			raise NotFoundError("Notification not found")
		return record
