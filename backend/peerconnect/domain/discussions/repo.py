"""Async repository helpers for discussions, comments, likes and bookmarks."""

from __future__ import annotations

import asyncpg

from peerconnect.domain.discussions import models
from peerconnect.domain.discussions.feed_query import POST_SELECT, FeedQuery
from peerconnect.domain.errors import NotFoundError, ValidationError
from peerconnect.infra.postgres import connection, transaction


def _foreign_key_error(exc: asyncpg.ForeignKeyViolationError) -> NotFoundError:
	constraint = (getattr(exc, "constraint_name", None) or "").lower()
	if "module_id" in constraint:
		return NotFoundError("Module not found")
	if "discussion_id" in constraint:
		return NotFoundError("Post not found")
	return NotFoundError("Student not found")


class DiscussionsRepository:
	"""Thin data-access layer around asyncpg."""

	# --- Posts ------------------------------------------------------------

	async def list_posts(self, query: FeedQuery) -> list[models.Post]:
		sql, values = query.compile()
		async with connection() as conn:
			rows = await conn.fetch(sql, *values)
		return [models.Post.from_row(row) for row in rows]

	async def fetch_post_and_count_view(self, post_id: int) -> models.Post | None:
		"""Increment ``views`` and read the post back in one statement.

		The returned ``views`` already includes this fetch.
		"""
		async with connection() as conn:
			row = await conn.fetchrow(
				"WITH bumped AS (UPDATE discussions SET views = views + 1 WHERE id=$1 RETURNING *)"
				+ POST_SELECT.format(source="bumped"),
				post_id,
			)
		return models.Post.from_row(row) if row else None

	async def insert_post(
		self,
		*,
		student_id: int,
		title: str,
		content: str,
		category: str,
		module_id: int | None,
	) -> models.Post:
		async with connection() as conn:
			try:
				row = await conn.fetchrow(
					"""
					WITH inserted AS (
						INSERT INTO discussions (title, content, category, student_id, module_id)
						VALUES ($1, $2, $3, $4, $5)
						RETURNING *
					)
					"""
					+ POST_SELECT.format(source="inserted"),
					title,
					content,
					category,
					student_id,
					module_id,
				)
			except asyncpg.ForeignKeyViolationError as exc:
				raise _foreign_key_error(exc) from exc
		return models.Post.from_row(row)

	# --- Comments ---------------------------------------------------------

	async def list_comments(self, post_id: int) -> list[models.Comment]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT c.id, c.discussion_id, c.student_id, c.content, c.created_at,
					s.first_name AS commenter_first_name,
					s.last_name AS commenter_last_name,
					s.avatar AS commenter_avatar
				FROM comments c
				LEFT JOIN student s ON c.student_id = s.stu_id
				WHERE c.discussion_id = $1
				ORDER BY c.created_at ASC, c.id ASC
				""",
				post_id,
			)
		return [models.Comment.from_row(row) for row in rows]

	async def insert_comment(self, *, post_id: int, student_id: int, content: str) -> models.Comment:
		async with connection() as conn:
			try:
				row = await conn.fetchrow(
					"""
					WITH inserted AS (
						INSERT INTO comments (discussion_id, student_id, content)
						VALUES ($1, $2, $3)
						RETURNING *
					)
					SELECT c.id, c.discussion_id, c.student_id, c.content, c.created_at,
						s.first_name AS commenter_first_name,
						s.last_name AS commenter_last_name,
						s.avatar AS commenter_avatar
					FROM inserted c
					LEFT JOIN student s ON c.student_id = s.stu_id
					""",
					post_id,
					student_id,
					content,
				)
			except asyncpg.ForeignKeyViolationError as exc:
				raise _foreign_key_error(exc) from exc
		return models.Comment.from_row(row)

	# --- Likes ------------------------------------------------------------

	async def toggle_like(self, *, post_id: int, student_id: int) -> models.LikeToggle:
		"""Flip the viewer's like inside one transaction.

		The post row is locked first so concurrent toggles on the same post
		serialize; the like row and the counter always move together.
		"""
		async with transaction() as conn:
			locked = await conn.fetchval("SELECT id FROM discussions WHERE id=$1 FOR UPDATE", post_id)
			if locked is None:
				raise NotFoundError("Post not found")
			removed = await conn.fetchval(
				"DELETE FROM discussion_likes WHERE discussion_id=$1 AND student_id=$2 RETURNING id",
				post_id,
				student_id,
			)
			if removed is not None:
				likes = await conn.fetchval(
					"UPDATE discussions SET likes = GREATEST(likes - 1, 0) WHERE id=$1 RETURNING likes",
					post_id,
				)
				return models.LikeToggle(liked=False, likes=likes)
			try:
				await conn.execute(
					"INSERT INTO discussion_likes (discussion_id, student_id) VALUES ($1, $2)",
					post_id,
					student_id,
				)
			except asyncpg.ForeignKeyViolationError as exc:
				raise _foreign_key_error(exc) from exc
			likes = await conn.fetchval(
				"UPDATE discussions SET likes = likes + 1 WHERE id=$1 RETURNING likes",
				post_id,
			)
		return models.LikeToggle(liked=True, likes=likes)

	async def fetch_author(self, student_id: int) -> models.Author | None:
		async with connection() as conn:
			row = await conn.fetchrow(
				"SELECT stu_id, first_name, last_name, avatar FROM student WHERE stu_id=$1",
				student_id,
			)
		if not row:
			return None
		return models.Author(
			id=row["stu_id"],
			first_name=row["first_name"] or "Unknown",
			last_name=row["last_name"] or "",
			avatar=row["avatar"],
		)

	# --- Aggregates -------------------------------------------------------

	async def list_trending(self, *, limit: int = 5) -> list[models.TrendingPost]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT d.id, d.title, d.views, d.likes, d.student_id,
					s.first_name AS author_first_name,
					s.last_name AS author_last_name,
					s.avatar AS author_avatar
				FROM discussions d
				LEFT JOIN student s ON d.student_id = s.stu_id
				ORDER BY (d.views + d.likes) DESC, d.id DESC
				LIMIT $1
				""",
				limit,
			)
		return [
			models.TrendingPost(
				id=row["id"],
				title=row["title"],
				views=row["views"] or 0,
				likes=row["likes"] or 0,
				author=models.Author(
					id=row["student_id"],
					first_name=row["author_first_name"] or "Unknown",
					last_name=row["author_last_name"] or "",
					avatar=row["author_avatar"],
				),
			)
			for row in rows
		]

	async def list_tags(self, *, limit: int = 10) -> list[models.TagCount]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT category AS tag, COUNT(*)::int AS count
				FROM discussions
				GROUP BY category
				ORDER BY count DESC, tag ASC
				LIMIT $1
				""",
				limit,
			)
		return [models.TagCount(tag=row["tag"], count=row["count"]) for row in rows]

	async def stats(self) -> models.DiscussionStats:
		async with connection() as conn:
			row = await conn.fetchrow(
				"""
				SELECT
					(SELECT COUNT(*) FROM discussions)::int AS posts,
					(SELECT COUNT(*) FROM comments)::int AS comments,
					(SELECT COALESCE(SUM(views), 0) FROM discussions)::bigint AS views,
					(SELECT COALESCE(SUM(likes), 0) FROM discussions)::bigint AS likes
				"""
			)
		return models.DiscussionStats(**dict(row))

	# --- Bookmarks --------------------------------------------------------

	async def toggle_saved(self, *, post_id: int, student_id: int) -> bool:
		"""Save or unsave a post for the viewer; returns the new saved state."""
		if post_id <= 0:
			raise ValidationError("Missing discussion_id", field="discussion_id")
		async with transaction() as conn:
			exists = await conn.fetchval("SELECT id FROM discussions WHERE id=$1", post_id)
			if exists is None:
				raise NotFoundError("Post not found")
			removed = await conn.fetchval(
				"DELETE FROM student_saved_posts WHERE student_id=$1 AND discussion_id=$2 RETURNING id",
				student_id,
				post_id,
			)
			if removed is not None:
				return False
			await conn.execute(
				"""
				INSERT INTO student_saved_posts (student_id, discussion_id)
				VALUES ($1, $2)
				ON CONFLICT (student_id, discussion_id) DO NOTHING
				""",
				student_id,
				post_id,
			)
		return True

	async def list_saved(self, student_id: int) -> list[models.SavedPost]:
		async with connection() as conn:
			rows = await conn.fetch(
				"""
				SELECT d.id, d.title, d.content, d.category, d.created_at,
					sp.id AS save_id, sp.created_at AS saved_at
				FROM student_saved_posts sp
				JOIN discussions d ON sp.discussion_id = d.id
				WHERE sp.student_id = $1
				ORDER BY sp.created_at DESC, sp.id DESC
				""",
				student_id,
			)
		return [models.SavedPost.model_validate(dict(row)) for row in rows]
