"""Socket.IO namespace for notifications and conversation rooms."""

from __future__ import annotations

import logging
from typing import Any, Optional

import socketio

from peerconnect.infra.auth import AuthenticatedUser, resolve_socket_user
from peerconnect.obs import metrics as obs_metrics
from peerconnect.realtime.channels import DEFAULT_NAMESPACE, RealtimeChannelManager

logger = logging.getLogger(__name__)


def _conversation_id(payload: Any) -> Optional[int]:
	# Clients send either the bare id or {"conversationId": id}
	if isinstance(payload, dict):
		payload = payload.get("conversationId", payload.get("conversation_id"))
	if isinstance(payload, bool):
		return None
	try:
		value = int(str(payload).strip())
	except (TypeError, ValueError):
		return None
	return value if value > 0 else None


class PeerConnectNamespace(socketio.AsyncNamespace):
	"""Authenticates connections and lets clients join conversation rooms."""

	def __init__(self, channels: RealtimeChannelManager, namespace: str = DEFAULT_NAMESPACE) -> None:
		super().__init__(namespace)
		self._channels = channels
		self._sessions: dict[str, AuthenticatedUser] = {}

	async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None) -> None:
		user = resolve_socket_user(environ, auth)
		self._sessions[sid] = user
		obs_metrics.socket_connected(self.namespace)
		logger.info("socket_connected", extra={"sid": sid, "viewer_id": user.id})

	async def on_disconnect(self, sid: str, reason: Any = None) -> None:
		if self._sessions.pop(sid, None) is not None:
			obs_metrics.socket_disconnected(self.namespace)

	async def on_join_conversation(self, sid: str, payload: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, "join_conversation")
		if sid not in self._sessions:
			return
		conversation_id = _conversation_id(payload)
		if conversation_id is None:
			return
		await self._channels.join_conversation(sid, conversation_id)

	async def on_leave_conversation(self, sid: str, payload: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, "leave_conversation")
		conversation_id = _conversation_id(payload)
		if conversation_id is None:
			return
		await self._channels.leave_conversation(sid, conversation_id)

	def session_user(self, sid: str) -> Optional[AuthenticatedUser]:
		return self._sessions.get(sid)
