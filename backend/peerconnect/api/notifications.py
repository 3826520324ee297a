"""Global notification log and read-state management."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from peerconnect.api.deps import get_notification_service
from peerconnect.domain.notifications.service import NotificationService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
async def list_notifications_endpoint(
	_: AuthenticatedUser = Depends(get_current_user),
	service: NotificationService = Depends(get_notification_service),
) -> dict:
	records = await service.list_notifications()
	return {"success": True, "notifications": [record.model_dump(mode="json") for record in records]}


# Registered before "/{notification_id}/read" so the literal path wins
@router.put("/read-all")
async def mark_all_read_endpoint(
	_: AuthenticatedUser = Depends(get_current_user),
	service: NotificationService = Depends(get_notification_service),
) -> dict:
	count = await service.mark_all_read()
	return {"success": True, "count": count}


@router.put("/{notification_id}/read")
async def mark_read_endpoint(
	notification_id: int,
	_: AuthenticatedUser = Depends(get_current_user),
	service: NotificationService = Depends(get_notification_service),
) -> dict:
	record = await service.mark_read(notification_id)
	return {"success": True, "notification": {"id": record.id, "read": record.read}}


@router.put("/{notification_id}/unread")
async def mark_unread_endpoint(
	notification_id: int,
	_: AuthenticatedUser = Depends(get_current_user),
	service: NotificationService = Depends(get_notification_service),
) -> dict:
	record = await service.mark_unread(notification_id)
	return {"success": True, "notification": {"id": record.id, "read": record.read}}
