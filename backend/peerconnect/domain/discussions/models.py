"""Domain models for discussion posts, comments and aggregates."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class Author(BaseModel):
	id: Optional[int] = None
	first_name: str = "Unknown"
	last_name: str = ""
	avatar: Optional[str] = None

	@property
	def display_name(self) -> str:
		return f"{self.first_name} {self.last_name}"


class ModuleRef(BaseModel):
	id: int
	name: Optional[str] = None
	code: Optional[str] = None


class Post(BaseModel):
	"""A discussion post enriched with its author and module."""

	id: int
	title: str
	content: str
	category: str = "General"
	created_at: datetime
	likes: int = 0
	views: int = 0
	student_id: Optional[int] = None
	module: Optional[ModuleRef] = None
	author: Author

	model_config = ConfigDict(from_attributes=True)

	@classmethod
	def from_row(cls, row: Mapping[str, Any]) -> "Post":
		module_id = row["module_id"]
		return cls(
			id=row["id"],
			title=row["title"],
			content=row["content"],
			category=row["category"] or "General",
			created_at=row["created_at"],
			likes=max(row["likes"] or 0, 0),
			views=row["views"] or 0,
			student_id=row["student_id"],
			module=ModuleRef(id=module_id, name=row["module_name"], code=row["module_code"]) if module_id else None,
			author=Author(
				id=row["student_id"],
				first_name=row["author_first_name"] or "Unknown",
				last_name=row["author_last_name"] or "",
				avatar=row["author_avatar"],
			),
		)


class Comment(BaseModel):
	id: int
	discussion_id: int
	content: str
	created_at: datetime
	commenter: Author

	@classmethod
	def from_row(cls, row: Mapping[str, Any]) -> "Comment":
		return cls(
			id=row["id"],
			discussion_id=row["discussion_id"],
			content=row["content"],
			created_at=row["created_at"],
			commenter=Author(
				id=row["student_id"],
				first_name=row["commenter_first_name"] or "Unknown",
				last_name=row["commenter_last_name"] or "",
				avatar=row["commenter_avatar"],
			),
		)


class LikeToggle(BaseModel):
	liked: bool
	likes: int


class TrendingPost(BaseModel):
	id: int
	title: str
	views: int
	likes: int
	author: Author


class TagCount(BaseModel):
	tag: str
	count: int


class DiscussionStats(BaseModel):
	posts: int
	comments: int
	views: int
	likes: int


class SavedPost(BaseModel):
	id: int
	title: str
	content: str
	category: str
	created_at: datetime
	save_id: int
	saved_at: Optional[datetime] = None
