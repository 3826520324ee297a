"""Catalogue and grant records: modules, departments, subscriptions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Module(BaseModel):
	id: int
	code: str
	name: str
	course_id: Optional[int] = None

	model_config = ConfigDict(from_attributes=True)


class Department(BaseModel):
	id: int
	name: str

	model_config = ConfigDict(from_attributes=True)


class Subscription(BaseModel):
	"""An explicit subscription grant joined with its module."""

	id: int
	module_id: int
	module_name: Optional[str] = None
	code: Optional[str] = None
	created_at: Optional[datetime] = None

	model_config = ConfigDict(from_attributes=True)


class Enrollment(BaseModel):
	id: int
	module_id: int

	model_config = ConfigDict(from_attributes=True)
