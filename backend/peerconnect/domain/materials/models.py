"""Study material records and listing queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from peerconnect.domain.discussions.feed_query import Pagination
from peerconnect.infra.postgres import SqlParams

MATERIAL_SORTS: dict[str, str] = {
	"popular": "sm.downloads DESC",
	"recent": "sm.uploaded_at DESC",
}
DEFAULT_MATERIAL_SORT = "recent"


class StudyMaterial(BaseModel):
	id: int
	title: str
	module: Optional[str] = None
	year: Optional[int] = None
	type: Optional[str] = None
	description: Optional[str] = None
	file_url: Optional[str] = None
	downloads: int = 0
	uploaded_at: Optional[datetime] = None
	uploader_id: Optional[int] = None
	uploader_name: Optional[str] = None

	model_config = ConfigDict(from_attributes=True)


class MaterialPage(BaseModel):
	materials: list[StudyMaterial]
	page: int
	total_pages: int
	total_count: int


class UploadStatus(BaseModel):
	can_download: bool
	uploaded_count: int


def _clean(value: Any) -> Optional[str]:
	text = str(value).strip() if value is not None else ""
	return text or None


@dataclass(frozen=True)
class MaterialQuery:
	search: Optional[str] = None
	module: Optional[str] = None
	type: Optional[str] = None
	year: Optional[int] = None
	sort: str = DEFAULT_MATERIAL_SORT
	pagination: Pagination = field(default_factory=Pagination)

	@classmethod
	def from_params(
		cls,
		*,
		search: Any = None,
		module: Any = None,
		type: Any = None,
		year: Any = None,
		sort: Any = None,
		page: Any = None,
		limit: Any = None,
	) -> "MaterialQuery":
		year_text = _clean(year)
		sort_key = _clean(sort) or DEFAULT_MATERIAL_SORT
		return cls(
			search=_clean(search),
			module=_clean(module),
			type=_clean(type),
			year=int(year_text) if year_text and year_text.isdigit() else None,
			sort=sort_key if sort_key in MATERIAL_SORTS else DEFAULT_MATERIAL_SORT,
			pagination=Pagination.from_params(page, limit),
		)

	def _where(self, params: SqlParams) -> str:
		conditions = ["TRUE"]
		if self.search:
			pattern = params.add(f"%{self.search.lower()}%")
			conditions.append(
				f"(LOWER(sm.title) LIKE {pattern} OR LOWER(sm.description) LIKE {pattern} OR LOWER(sm.module) LIKE {pattern})"
			)
		if self.module:
			conditions.append(f"sm.module = {params.add(self.module)}")
		if self.type:
			conditions.append(f"sm.type = {params.add(self.type)}")
		if self.year is not None:
			conditions.append(f"sm.year = {params.add(self.year)}")
		return " AND ".join(conditions)

	def compile_count(self) -> tuple[str, list[object]]:
		params = SqlParams()
		sql = f"SELECT COUNT(*)::int FROM study_materials sm WHERE {self._where(params)}"
		return sql, params.values

	def compile_page(self) -> tuple[str, list[object]]:
		params = SqlParams()
		where = self._where(params)
		limit = params.add(self.pagination.size)
		offset = params.add(self.pagination.offset)
		sql = f"""
			SELECT sm.id, sm.title, sm.module, sm.year, sm.type, sm.description, sm.file_url,
				sm.downloads, sm.uploaded_at, sm.uploader_id,
				NULLIF(TRIM(COALESCE(s.first_name, '') || ' ' || COALESCE(s.last_name, '')), '') AS uploader_name
			FROM study_materials sm
			LEFT JOIN student s ON sm.uploader_id = s.stu_id
			WHERE {where}
			ORDER BY {MATERIAL_SORTS[self.sort]}, sm.id DESC
			LIMIT {limit} OFFSET {offset}
		"""
		return sql, params.values
