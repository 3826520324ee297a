"""Async repository for study materials and the upload gate."""

from __future__ import annotations

from peerconnect.domain.materials.models import MaterialQuery, StudyMaterial
from peerconnect.infra.postgres import connection, transaction

_COLUMNS = "id, title, module, year, type, description, file_url, downloads, uploaded_at, uploader_id"


class MaterialsRepository:
	async def count(self, query: MaterialQuery) -> int:
		sql, values = query.compile_count()
		async with connection() as conn:
			total = await conn.fetchval(sql, *values)
		return int(total or 0)

	async def list_page(self, query: MaterialQuery) -> list[StudyMaterial]:
		sql, values = query.compile_page()
		async with connection() as conn:
			rows = await conn.fetch(sql, *values)
		return [StudyMaterial.model_validate(dict(row)) for row in rows]

	async def insert_with_gate(
		self,
		*,
		uploader_id: int,
		title: str,
		module: str,
		year: int,
		type: str,
		description: str,
		file_url: str,
	) -> StudyMaterial:
		"""Store the material and record that the uploader unlocked downloads."""
		async with transaction() as conn:
			row = await conn.fetchrow(
				f"""
				INSERT INTO study_materials (title, module, year, type, description, file_url, downloads, uploader_id)
				VALUES ($1, $2, $3, $4, $5, $6, 0, $7)
				RETURNING {_COLUMNS}
				""",
				title,
				module,
				year,
				type,
				description,
				file_url,
				uploader_id,
			)
			await conn.execute(
				"INSERT INTO study_uploads (stu_id) VALUES ($1) ON CONFLICT (stu_id) DO NOTHING",
				uploader_id,
			)
		return StudyMaterial.model_validate(dict(row))

	async def upload_count(self, viewer_id: int) -> int:
		async with connection() as conn:
			total = await conn.fetchval("SELECT COUNT(*)::int FROM study_uploads WHERE stu_id=$1", viewer_id)
		return int(total or 0)

	async def get(self, material_id: int) -> StudyMaterial | None:
		async with connection() as conn:
			row = await conn.fetchrow(f"SELECT {_COLUMNS} FROM study_materials WHERE id=$1", material_id)
		return StudyMaterial.model_validate(dict(row)) if row else None

	async def increment_downloads(self, material_id: int) -> None:
		async with connection() as conn:
			await conn.execute("UPDATE study_materials SET downloads = downloads + 1 WHERE id=$1", material_id)
