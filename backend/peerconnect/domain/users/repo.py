"""Access to student profiles: lookups, search and self-service edits."""

from __future__ import annotations

from typing import Any, Mapping

from peerconnect.domain.users.models import UserProfile
from peerconnect.infra.postgres import SqlParams, connection

_PROFILE_COLUMNS = """
	stu_id AS id,
	stu_number AS student_number,
	stu_email AS email,
	first_name,
	last_name,
	year_of_study,
	department_id,
	bio,
	registration_status,
	avatar,
	is_active
"""

# Columns a student may edit on their own profile
EDITABLE_COLUMNS: tuple[str, ...] = ("first_name", "last_name", "year_of_study", "department_id", "bio")

SEARCH_LIMIT = 50


class UsersRepository:
	async def get(self, user_id: int) -> UserProfile | None:
		async with connection() as conn:
			row = await conn.fetchrow(f"SELECT {_PROFILE_COLUMNS} FROM student WHERE stu_id=$1", user_id)
		return UserProfile.model_validate(dict(row)) if row else None

	async def list_all(self) -> list[UserProfile]:
		async with connection() as conn:
			rows = await conn.fetch(f"SELECT {_PROFILE_COLUMNS} FROM student ORDER BY stu_id ASC")
		return [UserProfile.model_validate(dict(row)) for row in rows]

	async def search(self, text: str, *, limit: int = SEARCH_LIMIT) -> list[UserProfile]:
		async with connection() as conn:
			rows = await conn.fetch(
				f"""
				SELECT {_PROFILE_COLUMNS}
				FROM student
				WHERE first_name ILIKE $1
					OR last_name ILIKE $1
					OR stu_number ILIKE $1
					OR stu_email ILIKE $1
				ORDER BY stu_id ASC
				LIMIT $2
				""",
				f"%{text}%",
				limit,
			)
		return [UserProfile.model_validate(dict(row)) for row in rows]

	async def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> UserProfile | None:
		"""Apply ``changes`` (editable columns only) and return the updated profile."""
		params = SqlParams()
		assignments = [f"{column}={params.add(changes[column])}" for column in EDITABLE_COLUMNS if column in changes]
		if not assignments:
			return await self.get(user_id)
		user_param = params.add(user_id)
		async with connection() as conn:
			row = await conn.fetchrow(
				f"UPDATE student SET {', '.join(assignments)} WHERE stu_id={user_param} RETURNING {_PROFILE_COLUMNS}",
				*params.values,
			)
		return UserProfile.model_validate(dict(row)) if row else None
