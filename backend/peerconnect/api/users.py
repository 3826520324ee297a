"""Student profile lookups and self-service edits."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from peerconnect.api.deps import get_users_service
from peerconnect.api.schemas import ProfileUpdateRequest
from peerconnect.domain.users.models import UserProfile
from peerconnect.domain.users.service import UsersService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserProfile])
async def list_users_endpoint(
	_: AuthenticatedUser = Depends(get_current_user),
	service: UsersService = Depends(get_users_service),
) -> list[UserProfile]:
	return await service.list_profiles()


@router.get("/me", response_model=UserProfile)
async def me_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: UsersService = Depends(get_users_service),
) -> UserProfile:
	return await service.get_profile(auth_user.id)


@router.get("/search", response_model=list[UserProfile])
async def search_users_endpoint(
	query: Optional[str] = Query(default=None),
	_: AuthenticatedUser = Depends(get_current_user),
	service: UsersService = Depends(get_users_service),
) -> list[UserProfile]:
	return await service.search(query)


@router.get("/{user_id}", response_model=UserProfile)
async def get_user_endpoint(
	user_id: int,
	_: AuthenticatedUser = Depends(get_current_user),
	service: UsersService = Depends(get_users_service),
) -> UserProfile:
	return await service.get_profile(user_id)


@router.put("/profile", response_model=UserProfile)
async def update_profile_endpoint(
	payload: ProfileUpdateRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: UsersService = Depends(get_users_service),
) -> UserProfile:
	return await service.update_profile(auth_user.id, payload.model_dump(exclude_unset=True))
