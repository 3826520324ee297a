"""Service layer for the module catalogue and grant management."""

from __future__ import annotations

import logging

from peerconnect.domain.errors import NotFoundError
from peerconnect.domain.modules import models
from peerconnect.domain.modules.repo import ModulesRepository

logger = logging.getLogger(__name__)


class ModulesService:
	def __init__(self, repository: ModulesRepository | None = None) -> None:
		self.repo = repository or ModulesRepository()

	async def list_modules(self) -> list[models.Module]:
		return await self.repo.list_modules()

	async def list_departments(self) -> list[models.Department]:
		return await self.repo.list_departments()

	async def subscribe(self, viewer_id: int, module_id: int) -> models.Subscription | None:
		"""Grant a subscription. Returns ``None`` when the viewer was already subscribed."""
		if await self.repo.get_module(module_id) is None:
			raise NotFoundError("Module not found")
		subscription = await self.repo.subscribe(viewer_id, module_id)
		if subscription is None:
			logger.info("subscription_exists", extra={"viewer_id": viewer_id, "module_id": module_id})
		return subscription

	async def list_subscriptions(self, viewer_id: int) -> list[models.Subscription]:
		return await self.repo.list_subscriptions(viewer_id)

	async def unsubscribe(self, viewer_id: int, subscription_id: int) -> None:
		if not await self.repo.delete_subscription(viewer_id, subscription_id):
			raise NotFoundError("Subscription not found")

	async def enroll(self, viewer_id: int, module_id: int) -> bool:
		if await self.repo.get_module(module_id) is None:
			raise NotFoundError("Module not found")
		return await self.repo.enroll(viewer_id, module_id)
