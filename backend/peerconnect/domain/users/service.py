"""Profile lookups and edits for the authenticated viewer and other students."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from peerconnect.domain.errors import NotFoundError, ValidationError
from peerconnect.domain.users.models import UserProfile
from peerconnect.domain.users.repo import EDITABLE_COLUMNS, UsersRepository


class UsersService:
	def __init__(self, repository: UsersRepository | None = None) -> None:
		self.repo = repository or UsersRepository()

	async def get_profile(self, user_id: int) -> UserProfile:
		profile = await self.repo.get(user_id)
		if profile is None:
			raise NotFoundError("User not found")
		return profile

	async def list_profiles(self) -> list[UserProfile]:
		return await self.repo.list_all()

	async def search(self, query: Optional[str]) -> list[UserProfile]:
		text = (query or "").strip()
		if not text:
			raise ValidationError("Query is required", field="query")
		return await self.repo.search(text)

	async def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> UserProfile:
		"""Only the fields present in ``changes`` are written; others keep their value."""
		editable = {key: value for key, value in changes.items() if key in EDITABLE_COLUMNS}
		profile = await self.repo.update_profile(user_id, editable)
		if profile is None:
			raise NotFoundError("User not found")
		return profile
