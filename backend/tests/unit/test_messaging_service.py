import pytest

from peerconnect.domain.errors import NotFoundError, ValidationError
from peerconnect.domain.messaging.models import ConversationKey
from peerconnect.domain.messaging.service import MessagingService


@pytest.fixture
def service(fake_messaging_repo, fake_channels) -> MessagingService:
	return MessagingService(fake_messaging_repo, fake_channels)


def test_conversation_key_orders_participants():
	key = ConversationKey.from_participants(9, 4)
	assert key.participants() == (4, 9)
	assert key.other(4) == 9
	assert key.other(9) == 4


@pytest.mark.asyncio
async def test_start_is_idempotent_in_both_directions(service, fake_messaging_repo):
	first = await service.start_conversation(1, 2)
	again = await service.start_conversation(1, 2)
	reverse = await service.start_conversation(2, 1)

	assert first == again == reverse
	assert len(fake_messaging_repo.conversations) == 1


@pytest.mark.asyncio
async def test_distinct_pairs_get_distinct_conversations(service):
	one = await service.start_conversation(1, 2)
	two = await service.start_conversation(1, 3)

	assert one != two


@pytest.mark.asyncio
async def test_cannot_start_without_recipient(service):
	with pytest.raises(ValidationError) as excinfo:
		await service.start_conversation(1, None)
	assert excinfo.value.field == "recipientId"


@pytest.mark.asyncio
async def test_cannot_message_yourself(service):
	with pytest.raises(ValidationError):
		await service.start_conversation(5, 5)


@pytest.mark.asyncio
async def test_send_delivers_to_conversation_room(service, fake_channels):
	conversation_id = await service.start_conversation(1, 2)

	message = await service.send_message(conversation_id, 1, "See you in the library")

	assert message.content == "See you in the library"
	room_id, event, payload = fake_channels.room_emits[0]
	assert room_id == conversation_id
	assert event == "receive_message"
	assert payload["sender_id"] == 1
	assert payload["conversation_id"] == conversation_id
	assert fake_channels.broadcasts == []


@pytest.mark.asyncio
async def test_empty_message_is_rejected(service, fake_channels):
	conversation_id = await service.start_conversation(1, 2)

	with pytest.raises(ValidationError):
		await service.send_message(conversation_id, 1, "   ")
	assert fake_channels.room_emits == []


@pytest.mark.asyncio
async def test_unknown_conversation_is_not_found(service):
	with pytest.raises(NotFoundError):
		await service.send_message(404, 1, "hello")


@pytest.mark.asyncio
async def test_emit_failure_keeps_stored_message(service, fake_channels, fake_messaging_repo):
	conversation_id = await service.start_conversation(1, 2)
	fake_channels.fail = True

	await service.send_message(conversation_id, 2, "still saved")

	history = await service.list_messages(conversation_id)
	assert [message.content for message in history] == ["still saved"]
