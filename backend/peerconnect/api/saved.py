"""Saved-post bookmarks for the authenticated viewer."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from peerconnect.api.deps import get_discussion_service
from peerconnect.api.schemas import SaveToggleRequest
from peerconnect.domain.discussions.service import DiscussionService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/saved", tags=["saved"])


@router.get("/my")
async def list_saved_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	saved = await service.list_saved(auth_user.id)
	return {"success": True, "saved_posts": [item.model_dump(mode="json") for item in saved]}


@router.post("/toggle")
async def toggle_saved_endpoint(
	payload: SaveToggleRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	saved = await service.toggle_saved(payload.discussion_id, auth_user.id)
	return {"success": True, "saved": saved}
