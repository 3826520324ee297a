"""Student profile model exposed by the users API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserProfile(BaseModel):
	id: int
	student_number: Optional[str] = None
	email: Optional[str] = None
	first_name: Optional[str] = None
	last_name: Optional[str] = None
	year_of_study: Optional[str] = None
	department_id: Optional[int] = None
	bio: Optional[str] = None
	registration_status: Optional[str] = None
	avatar: Optional[str] = None
	is_active: Optional[bool] = None

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
