"""Async repository for modules, departments and scope grants."""

from __future__ import annotations

from peerconnect.domain.modules import models
from peerconnect.infra.postgres import connection


class ModulesRepository:
	"""Data access for the module catalogue and both grant sources."""

	async def list_modules(self) -> list[models.Module]:
		async with connection() as conn:
			rows = await conn.fetch("SELECT id, code, name, course_id FROM modules ORDER BY id ASC")
		return [models.Module.model_validate(dict(row)) for row in rows]

	async def get_module(self, module_id: int) -> models.Module | None:
		async with connection() as conn:
			row = await conn.fetchrow("SELECT id, code, name, course_id FROM modules WHERE id=$1", module_id)
		return models.Module.model_validate(dict(row)) if row else None

	async def list_departments(self) -> list[models.Department]:
		async with connection() as conn:
			rows = await conn.fetch("SELECT id, name FROM departments ORDER BY name ASC")
		return [models.Department.model_validate(dict(row)) for row in rows]

	# --- Scope grants -----------------------------------------------------

	async def list_subscribed_module_ids(self, viewer_id: int) -> list[int]:
		async with connection() as conn:
			rows = await conn.fetch(
				"SELECT module_id FROM student_subscriptions WHERE student_id=$1 AND module_id IS NOT NULL",
				viewer_id,
			)
		return [int(row["module_id"]) for row in rows]

	async def list_enrolled_module_ids(self, viewer_id: int) -> list[int]:
		async with connection() as conn:
			rows = await conn.fetch(
				"SELECT module_id FROM student_modules WHERE student_id=$1 AND module_id IS NOT NULL",
				viewer_id,
			)
		return [int(row["module_id"]) for row in rows]

	async def subscribe(self, viewer_id: int, module_id: int) -> models.Subscription | None:
		"""Insert a subscription grant; ``None`` when it already existed."""
		async with connection() as conn:
			row = await conn.fetchrow(
				"""
				WITH inserted AS (
					INSERT INTO student_subscriptions (student_id, module_id)
					VALUES ($1, $2)
					ON CONFLICT (student_id, module_id) DO NOTHING
					RETURNING id, module_id, created_at
				)
				SELECT i.id, i.module_id, i.created_at, m.name AS module_name, m.code
				FROM inserted i
				JOIN modules m ON m.id = i.module_id
				""",
				viewer_id,
				module_id,
			)
		return models.Subscription.model_validate(dict(row)) if row else None

	async def list_subscriptions(self, viewer_id: int) -> list[models.Subscription]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT ss.id, ss.module_id, m.name AS module_name, m.code, ss.created_at
				FROM student_subscriptions ss
				JOIN modules m ON ss.module_id = m.id
				WHERE ss.student_id = $1
				ORDER BY ss.created_at DESC, ss.id DESC
				""",
				viewer_id,
			)
		return [models.Subscription.model_validate(dict(row)) for row in rows]

	async def delete_subscription(self, viewer_id: int, subscription_id: int) -> bool:
		async with connection() as conn:
			row = await conn.fetchrow(
				"DELETE FROM student_subscriptions WHERE id=$1 AND student_id=$2 RETURNING id",
				subscription_id,
				viewer_id,
			)
		return row is not None

	async def enroll(self, viewer_id: int, module_id: int) -> bool:
		"""Insert an enrollment grant; False when it already existed."""
		async with connection() as conn:
			row = await conn.fetchrow(
				"""
				INSERT INTO student_modules (student_id, module_id)
				VALUES ($1, $2)
				ON CONFLICT (student_id, module_id) DO NOTHING
				RETURNING id
				""",
				viewer_id,
				module_id,
			)
		return row is not None
