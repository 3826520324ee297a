from unittest.mock import AsyncMock

import pytest

from peerconnect.realtime.channels import RealtimeChannelManager


@pytest.fixture
def server() -> AsyncMock:
	return AsyncMock()


def test_room_name_per_conversation():
	assert RealtimeChannelManager.conversation_room(42) == "conversation_42"


@pytest.mark.asyncio
async def test_broadcast_targets_whole_namespace(server):
	manager = RealtimeChannelManager(server)

	await manager.broadcast("new_notification", {"id": 1})

	server.emit.assert_awaited_once_with("new_notification", {"id": 1}, namespace="/")


@pytest.mark.asyncio
async def test_conversation_emit_targets_room(server):
	manager = RealtimeChannelManager(server)

	await manager.emit_to_conversation(5, "receive_message", {"content": "hi"})

	server.emit.assert_awaited_once_with(
		"receive_message",
		{"content": "hi"},
		room="conversation_5",
		namespace="/",
	)


@pytest.mark.asyncio
async def test_join_and_leave_rooms(server):
	manager = RealtimeChannelManager(server)

	await manager.join_conversation("sid-1", 7)
	await manager.leave_conversation("sid-1", 7)

	server.enter_room.assert_awaited_once_with("sid-1", "conversation_7", namespace="/")
	server.leave_room.assert_awaited_once_with("sid-1", "conversation_7", namespace="/")
