"""Feed query compilation for the visibility-scoped discussion listing.

A :class:`FeedQuery` captures everything a listing needs (scopes, filters,
pagination, sort) and compiles into exactly one parameter-bound statement.
Caller-supplied strings only ever become bind values; the ORDER BY column is
picked from :data:`SORT_COLUMNS`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from peerconnect.infra.postgres import SqlParams

DEFAULT_SORT = "created_at"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

SORT_COLUMNS: dict[str, str] = {
	"created_at": "d.created_at",
	"likes": "d.likes",
	"views": "d.views",
	"title": "d.title",
	"category": "d.category",
}

POST_SELECT = """
SELECT d.id, d.title, d.content, d.category, d.created_at, d.likes, d.views, d.student_id, d.module_id,
	s.first_name AS author_first_name,
	s.last_name AS author_last_name,
	s.avatar AS author_avatar,
	m.name AS module_name,
	m.code AS module_code
FROM {source} d
LEFT JOIN student s ON d.student_id = s.stu_id
LEFT JOIN modules m ON d.module_id = m.id
"""


def _coerce_int(raw: Any, default: int) -> int:
	if raw is None or isinstance(raw, bool):
		return default
	try:
		return int(str(raw).strip())
	except (TypeError, ValueError):
		return default


def normalize_sort(raw: Any) -> str:
	"""Return an allowlisted sort key; anything unknown becomes ``created_at``."""
	key = str(raw).strip() if raw is not None else ""
	return key if key in SORT_COLUMNS else DEFAULT_SORT


def parse_bool(raw: Any, default: bool = True) -> bool:
	if raw is None:
		return default
	if isinstance(raw, bool):
		return raw
	return str(raw).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Pagination:
	page: int = 1
	size: int = DEFAULT_PAGE_SIZE

	@classmethod
	def from_params(cls, page: Any = None, size: Any = None) -> "Pagination":
		page_num = max(_coerce_int(page, 1), 1)
		page_size = max(min(_coerce_int(size, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE), 1)
		return cls(page=page_num, size=page_size)

	@property
	def offset(self) -> int:
		return (self.page - 1) * self.size


@dataclass(frozen=True)
class FeedFilters:
	category: Optional[str] = None
	search: Optional[str] = None

	@classmethod
	def from_params(cls, category: Any = None, search: Any = None) -> "FeedFilters":
		category_value = str(category).strip() if category is not None else ""
		search_value = str(search).strip() if search is not None else ""
		return cls(category=category_value or None, search=search_value or None)


@dataclass(frozen=True)
class FeedQuery:
	scopes: frozenset[int]
	include_general: bool = True
	filters: FeedFilters = field(default_factory=FeedFilters)
	pagination: Pagination = field(default_factory=Pagination)
	sort: str = DEFAULT_SORT

	def __post_init__(self) -> None:
		object.__setattr__(self, "scopes", frozenset(self.scopes))
		object.__setattr__(self, "sort", normalize_sort(self.sort))

	@property
	def is_empty(self) -> bool:
		"""True when nothing can be visible, so the store need not be asked."""
		return not self.scopes and not self.include_general

	def _visibility_clause(self, params: SqlParams) -> str:
		if self.scopes:
			placeholder = params.add(sorted(self.scopes))
			scoped = f"d.module_id = ANY({placeholder}::int[])"
			if self.include_general:
				return f"(d.module_id IS NULL OR {scoped})"
			return scoped
		return "d.module_id IS NULL"

	def compile(self) -> tuple[str, list[object]]:
		"""Build the SQL text and its bind values."""
		if self.is_empty:
			raise ValueError("empty feed query has no statement")
		params = SqlParams()
		conditions = [self._visibility_clause(params)]
		if self.filters.category:
			conditions.append(f"d.category = {params.add(self.filters.category)}")
		if self.filters.search:
			pattern = params.add(f"%{self.filters.search}%")
			conditions.append(f"(d.title ILIKE {pattern} OR d.content ILIKE {pattern})")
		order_column = SORT_COLUMNS[self.sort]
		limit = params.add(self.pagination.size)
		offset = params.add(self.pagination.offset)
		sql = (
			POST_SELECT.format(source="discussions")
			+ "WHERE "
			+ " AND ".join(conditions)
			+ f"\nORDER BY {order_column} DESC, d.id DESC\nLIMIT {limit} OFFSET {offset}"
		)
		return sql, params.values


__all__ = [
	"DEFAULT_PAGE_SIZE",
	"DEFAULT_SORT",
	"FeedFilters",
	"FeedQuery",
	"MAX_PAGE_SIZE",
	"POST_SELECT",
	"Pagination",
	"SORT_COLUMNS",
	"normalize_sort",
	"parse_bool",
]
