"""AsyncPG pool management and the transactional boundary for multi-step writes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from peerconnect.settings import settings

_pool: Optional[asyncpg.pool.Pool] = None


async def init_pool() -> asyncpg.pool.Pool:
	global _pool
	if _pool is None:
		# Force 127.0.0.1 instead of localhost to avoid IPv6 resolution surprises
		dsn = settings.postgres_url.replace("localhost", "127.0.0.1")
		_pool = await asyncpg.create_pool(
			dsn=dsn,
			min_size=settings.postgres_min_pool_size,
			max_size=settings.postgres_max_pool_size,
		)
	return _pool


def set_pool(pool: Optional[asyncpg.pool.Pool]) -> None:
	global _pool
	_pool = pool


async def get_pool() -> asyncpg.pool.Pool:
	if _pool is None:
		await init_pool()
	assert _pool is not None
	return _pool


async def close_pool() -> None:
	global _pool
	if _pool is not None:
		await _pool.close()
		_pool = None


@asynccontextmanager
async def connection() -> AsyncIterator[asyncpg.Connection]:
	"""Borrow a pooled connection for a single step; released on exit."""
	pool = await get_pool()
	async with pool.acquire() as conn:
		yield conn


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
	"""Borrow a connection wrapped in a transaction; commits on clean exit."""
	pool = await get_pool()
	async with pool.acquire() as conn:
		async with conn.transaction():
			yield conn


class SqlParams:
	"""Collects bind values and hands out matching ``$n`` placeholders.

	Only values are bound here. Identifiers (columns, sort keys) must come
	from a fixed allowlist at the call site.
	"""

	def __init__(self) -> None:
		self.values: list[object] = []

	def add(self, value: object) -> str:
		self.values.append(value)
		return f"${len(self.values)}"
