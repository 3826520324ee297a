"""Write-then-notify stage: persist a notification, then push it live.

Services call :class:`EventNotifier` only after the triggering write has
returned. Persistence always happens before emission, so a client never sees
an event the store does not hold. A failed push is logged and counted; the
caller never sees it.
"""

from __future__ import annotations

import logging
from typing import Protocol

from peerconnect.domain.notifications.models import NotificationRecord, NotificationType
from peerconnect.domain.notifications.repo import NotificationsRepository
from peerconnect.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

NEW_NOTIFICATION_EVENT = "new_notification"


class BroadcastChannel(Protocol):
	async def broadcast(self, event: str, payload: object) -> None:
		...


class EventNotifier:
	def __init__(self, repository: NotificationsRepository, channels: BroadcastChannel) -> None:
		self.repo = repository
		self.channels = channels

	async def notify(self, event_type: NotificationType | str, ref_id: int | None, message: str) -> NotificationRecord:
		kind = event_type.value if isinstance(event_type, NotificationType) else str(event_type)
		try:
			record = await self.repo.insert(type=kind, ref_id=ref_id, message=message)
		except Exception:
			# The triggering write is already committed at this point
			obs_metrics.notification_persist_failed(kind)
			logger.exception("notification_persist_failed", extra={"type": kind, "ref_id": ref_id})
			raise
		obs_metrics.notification_persisted(kind)

		try:
			await self.channels.broadcast(NEW_NOTIFICATION_EVENT, record.to_event())
		except Exception:
			obs_metrics.notification_emit_failed(kind)
			logger.warning(
				"notification_emit_failed",
				extra={"type": kind, "notification_id": record.id},
				exc_info=True,
			)
		return record
