"""Module catalogue, departments and scope-grant routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from peerconnect.api.deps import get_modules_service
from peerconnect.api.schemas import SubscribeRequest
from peerconnect.domain.modules.service import ModulesService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(tags=["modules"])


@router.get("/modules")
async def list_modules_endpoint(service: ModulesService = Depends(get_modules_service)) -> dict:
	modules = await service.list_modules()
	return {"success": True, "modules": [module.model_dump() for module in modules]}


@router.post("/modules/{module_id}/enroll")
async def enroll_endpoint(
	module_id: int,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ModulesService = Depends(get_modules_service),
) -> dict:
	created = await service.enroll(auth_user.id, module_id)
	return {"success": True, "enrolled": True, "created": created}


@router.get("/departments")
async def list_departments_endpoint(service: ModulesService = Depends(get_modules_service)) -> list[dict]:
	departments = await service.list_departments()
	return [department.model_dump() for department in departments]


@router.post("/subscriptions")
async def subscribe_endpoint(
	payload: SubscribeRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ModulesService = Depends(get_modules_service),
) -> dict:
	subscription = await service.subscribe(auth_user.id, payload.module_id)
	if subscription is None:
		return {"success": False, "message": "Already subscribed"}
	return {"success": True, "subscription": subscription.model_dump(mode="json")}


@router.get("/subscriptions/my")
async def list_subscriptions_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ModulesService = Depends(get_modules_service),
) -> dict:
	subscriptions = await service.list_subscriptions(auth_user.id)
	return {"success": True, "subscriptions": [item.model_dump(mode="json") for item in subscriptions]}


@router.delete("/subscriptions/{subscription_id}")
async def unsubscribe_endpoint(
	subscription_id: int,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: ModulesService = Depends(get_modules_service),
) -> dict:
	await service.unsubscribe(auth_user.id, subscription_id)
	return {"success": True, "message": "Unsubscribed successfully"}
