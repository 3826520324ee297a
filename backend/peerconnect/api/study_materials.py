"""Study material exchange routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, RedirectResponse, Response

from peerconnect.api.deps import get_materials_service
from peerconnect.api.schemas import UploadMaterialRequest
from peerconnect.domain.materials.models import MaterialQuery
from peerconnect.domain.materials.service import MaterialsService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/study-materials", tags=["study-materials"])


@router.get("")
async def list_materials_endpoint(
	search: Optional[str] = Query(default=None),
	module: Optional[str] = Query(default=None),
	type: Optional[str] = Query(default=None),
	year: Optional[str] = Query(default=None),
	sort: Optional[str] = Query(default=None),
	page: Optional[str] = Query(default=None),
	limit: Optional[str] = Query(default=None),
	service: MaterialsService = Depends(get_materials_service),
) -> dict:
	query = MaterialQuery.from_params(
		search=search,
		module=module,
		type=type,
		year=year,
		sort=sort,
		page=page,
		limit=limit,
	)
	result = await service.list_materials(query)
	return {
		"success": True,
		"materials": [material.model_dump(mode="json") for material in result.materials],
		"page": result.page,
		"totalPages": result.total_pages,
		"totalCount": result.total_count,
	}


@router.post("/upload")
async def upload_material_endpoint(
	payload: UploadMaterialRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MaterialsService = Depends(get_materials_service),
) -> dict:
	material = await service.upload(
		auth_user.id,
		title=payload.title,
		module=payload.module,
		year=payload.year,
		type=payload.type,
		description=payload.description,
		file_url=payload.file_url,
		link=payload.link,
	)
	return {"success": True, "material": material.model_dump(mode="json")}


@router.get("/me/status")
async def upload_status_endpoint(
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MaterialsService = Depends(get_materials_service),
) -> dict:
	status = await service.status(auth_user.id)
	return {"success": True, **status.model_dump()}


@router.get("/download/{material_id}")
async def download_material_endpoint(
	material_id: int,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: MaterialsService = Depends(get_materials_service),
) -> Response:
	target = await service.download(auth_user.id, material_id)
	if target.is_redirect:
		return RedirectResponse(target.redirect_url, status_code=302)
	return FileResponse(target.path, filename=target.path.name)
