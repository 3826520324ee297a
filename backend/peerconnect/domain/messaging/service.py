"""Direct messaging: idempotent conversation start and room delivery."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from peerconnect.domain.errors import NotFoundError, ValidationError
from peerconnect.domain.messaging.models import ConversationKey, ConversationSummary, Message
from peerconnect.domain.messaging.repo import MessagingRepository
from peerconnect.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

RECEIVE_MESSAGE_EVENT = "receive_message"


class ConversationChannel(Protocol):
	async def emit_to_conversation(self, conversation_id: int, event: str, payload: object) -> None:
		...


class MessagingService:
	def __init__(self, repository: MessagingRepository, channels: ConversationChannel) -> None:
		self.repo = repository
		self.channels = channels

	async def start_conversation(self, viewer_id: int, recipient_id: Optional[int]) -> int:
		if not recipient_id:
			raise ValidationError("Recipient ID required", field="recipientId")
		if int(recipient_id) == int(viewer_id):
			raise ValidationError("Cannot start a conversation with yourself", field="recipientId")
		key = ConversationKey.from_participants(viewer_id, recipient_id)
		conversation_id, created = await self.repo.get_or_create_conversation(key)
		obs_metrics.inc_conversation_started("created" if created else "existing")
		return conversation_id

	async def list_conversations(self, viewer_id: int) -> list[ConversationSummary]:
		return await self.repo.list_conversations(viewer_id)

	async def send_message(self, conversation_id: int, sender_id: int, content: Optional[str]) -> Message:
		text = (content or "").strip()
		if not text:
			raise ValidationError("Message cannot be empty", field="content")
		if await self.repo.get_conversation(conversation_id) is None:
			raise NotFoundError("Conversation not found")
		message = await self.repo.insert_message(conversation_id=conversation_id, sender_id=sender_id, content=str(content))
		obs_metrics.inc_message_sent()

		try:
			await self.channels.emit_to_conversation(conversation_id, RECEIVE_MESSAGE_EVENT, message.to_event())
		except Exception:
			logger.warning("message_emit_failed", extra={"conversation_id": conversation_id}, exc_info=True)
		return message

	async def list_messages(self, conversation_id: int) -> list[Message]:
		return await self.repo.list_messages(conversation_id)
