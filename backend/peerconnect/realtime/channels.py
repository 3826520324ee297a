"""Realtime delivery channels over the shared Socket.IO server.

Two kinds of audience exist: the implicit broadcast group (every connected
client on the namespace) and one room per conversation. The manager is built
once at startup and handed to the services that publish events.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio

from peerconnect.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "/"


class RealtimeChannelManager:
	"""Fire-and-forget publisher: no acknowledgements, no retries."""

	def __init__(self, server: socketio.AsyncServer, namespace: str = DEFAULT_NAMESPACE) -> None:
		self._server = server
		self.namespace = namespace

	@staticmethod
	def conversation_room(conversation_id: int) -> str:
		return f"conversation_{conversation_id}"

	async def broadcast(self, event: str, payload: Any) -> None:
		obs_metrics.socket_event(self.namespace, event)
		await self._server.emit(event, payload, namespace=self.namespace)

	async def emit_to_conversation(self, conversation_id: int, event: str, payload: Any) -> None:
		obs_metrics.socket_event(self.namespace, event)
		await self._server.emit(
			event,
			payload,
			room=self.conversation_room(conversation_id),
			namespace=self.namespace,
		)

	async def join_conversation(self, sid: str, conversation_id: int) -> None:
		await self._server.enter_room(sid, self.conversation_room(conversation_id), namespace=self.namespace)
		logger.debug("conversation_joined", extra={"sid": sid, "conversation_id": conversation_id})

	async def leave_conversation(self, sid: str, conversation_id: int) -> None:
		await self._server.leave_room(sid, self.conversation_room(conversation_id), namespace=self.namespace)
