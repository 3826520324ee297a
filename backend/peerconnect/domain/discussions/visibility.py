"""Per-viewer module visibility derived from scope grants."""

from __future__ import annotations

from typing import Iterable, Protocol


class ScopeGrantSource(Protocol):
	async def list_subscribed_module_ids(self, viewer_id: int) -> Iterable[int]:
		...

	async def list_enrolled_module_ids(self, viewer_id: int) -> Iterable[int]:
		...


class VisibilityResolver:
	"""Merges subscription and enrollment grants into one scope set."""

	def __init__(self, grants: ScopeGrantSource) -> None:
		self.grants = grants

	async def resolve_scopes(self, viewer_id: int) -> frozenset[int]:
		"""Return the union of both grant sources.

		An empty set means the viewer sees no module-scoped content; whether
		general posts show up is the caller's decision.
		"""
		subscribed = await self.grants.list_subscribed_module_ids(viewer_id)
		enrolled = await self.grants.list_enrolled_module_ids(viewer_id)
		return frozenset(int(module_id) for module_id in subscribed) | frozenset(int(module_id) for module_id in enrolled)
