"""Study materials: listing, upload with the download gate, downloads."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from peerconnect.domain.errors import ForbiddenError, NotFoundError, ValidationError
from peerconnect.domain.materials.models import MaterialPage, MaterialQuery, StudyMaterial, UploadStatus
from peerconnect.domain.materials.repo import MaterialsRepository
from peerconnect.domain.materials.storage import DownloadTarget, MaterialStorage
from peerconnect.domain.notifications.models import NotificationType, material_uploaded_message
from peerconnect.domain.notifications.notifier import EventNotifier
from peerconnect.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

DOWNLOAD_LOCKED = "Access Denied: Upload at least one study material to unlock downloads."


class MaterialsService:
	def __init__(
		self,
		repository: MaterialsRepository,
		notifier: EventNotifier,
		storage: MaterialStorage,
	) -> None:
		self.repo = repository
		self.notifier = notifier
		self.storage = storage

	async def list_materials(self, query: MaterialQuery) -> MaterialPage:
		total = await self.repo.count(query)
		materials = await self.repo.list_page(query)
		size = query.pagination.size
		return MaterialPage(
			materials=materials,
			page=query.pagination.page,
			total_pages=max(1, math.ceil(total / size)),
			total_count=total,
		)

	async def upload(
		self,
		viewer_id: int,
		*,
		title: Optional[str],
		module: Optional[str],
		year: Any,
		type: Optional[str],
		description: Optional[str] = None,
		file_url: Optional[str] = None,
		link: Optional[str] = None,
	) -> StudyMaterial:
		for field_name, value in (("title", title), ("module", module), ("year", year), ("type", type)):
			if value is None or not str(value).strip():
				raise ValidationError("Missing required fields", field=field_name)
		try:
			year_value = int(str(year).strip())
		except ValueError:
			raise ValidationError("Year must be numeric", field="year") from None

		stored = (file_url or "").strip()
		linked = (link or "").strip()
		if stored and linked:
			raise ValidationError("Provide a file OR a link, not both.", field="link")
		if not stored and not linked:
			raise ValidationError("Please provide a file or a link.", field="file_url")

		material = await self.repo.insert_with_gate(
			uploader_id=viewer_id,
			title=str(title).strip(),
			module=str(module).strip(),
			year=year_value,
			type=str(type).strip(),
			description=(description or "").strip(),
			file_url=stored or linked,
		)
		obs_metrics.inc_material_uploaded("file" if stored else "link")
		logger.info("material_uploaded", extra={"material_id": material.id})

		await self.notifier.notify(NotificationType.MATERIAL, material.id, material_uploaded_message(material.title))
		return material

	async def status(self, viewer_id: int) -> UploadStatus:
		count = await self.repo.upload_count(viewer_id)
		return UploadStatus(can_download=count > 0, uploaded_count=count)

	async def download(self, viewer_id: int, material_id: int) -> DownloadTarget:
		if await self.repo.upload_count(viewer_id) == 0:
			obs_metrics.inc_material_download("locked")
			raise ForbiddenError(DOWNLOAD_LOCKED)
		material = await self.repo.get(material_id)
		if material is None:
			obs_metrics.inc_material_download("missing")
			raise NotFoundError("File not found")
		if not material.file_url:
			raise ValidationError("No file uploaded", field="file_url")
		await self.repo.increment_downloads(material_id)
		obs_metrics.inc_material_download("ok")
		return self.storage.resolve(material.file_url)
