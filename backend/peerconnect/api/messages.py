"""Direct messaging routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from peerconnect.api.deps import get_messaging_service
from peerconnect.api.schemas import SendMessageRequest, StartConversationRequest
from peerconnect.domain.messaging.service import MessagingService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/start")
async def start_conversation_endpoint(
	payload: StartConversationRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessagingService = Depends(get_messaging_service),
) -> dict:
	conversation_id = await service.start_conversation(auth_user.id, payload.recipient_id)
	return {"success": True, "conversation_id": conversation_id}


@router.get("/my")
async def list_conversations_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessagingService = Depends(get_messaging_service),
) -> dict:
	conversations = await service.list_conversations(auth_user.id)
	return {"success": True, "conversations": [summary.to_dict() for summary in conversations]}


@router.post("/{conversation_id}/message")
async def send_message_endpoint(
	conversation_id: int,
	payload: SendMessageRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MessagingService = Depends(get_messaging_service),
) -> dict:
	message = await service.send_message(conversation_id, auth_user.id, payload.content)
	return {"success": True, "message": message.to_event()}


@router.get("/{conversation_id}/messages")
async def list_messages_endpoint(
	conversation_id: int,
	_: AuthenticatedUser = Depends(get_current_user),
	service: MessagingService = Depends(get_messaging_service),
) -> dict:
	messages = await service.list_messages(conversation_id)
	return {"success": True, "messages": [message.to_dict() for message in messages]}
