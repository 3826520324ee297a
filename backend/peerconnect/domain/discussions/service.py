"""Service layer for discussions: feed reads and write-then-notify flows."""

from __future__ import annotations

import logging
from typing import Any, Optional

from peerconnect.domain.discussions import models
from peerconnect.domain.discussions.feed_query import FeedFilters, FeedQuery, Pagination
from peerconnect.domain.discussions.repo import DiscussionsRepository
from peerconnect.domain.discussions.visibility import VisibilityResolver
from peerconnect.domain.errors import NotFoundError, ValidationError
from peerconnect.domain.moderation.gate import ModerationGate
from peerconnect.domain.notifications import models as notification_models
from peerconnect.domain.notifications.models import NotificationType
from peerconnect.domain.notifications.notifier import BroadcastChannel, EventNotifier
from peerconnect.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

TRENDING_UPDATE_EVENT = "trending_update"
DEFAULT_CATEGORY = "General"


def _require_text(value: Optional[str], field: str) -> str:
	text = (value or "").strip()
	if not text:
		raise ValidationError("Missing required fields", field=field)
	return text


class DiscussionService:
	def __init__(
		self,
		repository: DiscussionsRepository,
		visibility: VisibilityResolver,
		notifier: EventNotifier,
		moderation: ModerationGate,
		channels: BroadcastChannel,
	) -> None:
		self.repo = repository
		self.visibility = visibility
		self.notifier = notifier
		self.moderation = moderation
		self.channels = channels

	# --- Reads ------------------------------------------------------------

	async def list_posts(
		self,
		viewer_id: int,
		*,
		include_general: bool = True,
		category: Any = None,
		search: Any = None,
		sort: Any = None,
		page: Any = None,
		limit: Any = None,
	) -> list[models.Post]:
		scopes = await self.visibility.resolve_scopes(viewer_id)
		query = FeedQuery(
			scopes=scopes,
			include_general=include_general,
			filters=FeedFilters.from_params(category, search),
			pagination=Pagination.from_params(page, limit),
			sort=sort,
		)
		if query.is_empty:
			obs_metrics.inc_feed_query("empty_scope")
			return []
		posts = await self.repo.list_posts(query)
		obs_metrics.inc_feed_query("ok")
		return posts

	async def get_post(self, post_id: int) -> tuple[models.Post, list[models.Comment]]:
		"""Fetch one post, counting the view, together with its comments."""
		post = await self.repo.fetch_post_and_count_view(post_id)
		if post is None:
			raise NotFoundError("Post not found")
		comments = await self.repo.list_comments(post_id)
		return post, comments

	async def trending(self) -> list[models.TrendingPost]:
		posts = await self.repo.list_trending(limit=5)
		try:
			await self.channels.broadcast(TRENDING_UPDATE_EVENT, [post.model_dump(mode="json") for post in posts])
		except Exception:
			logger.warning("trending_emit_failed", exc_info=True)
		return posts

	async def tags(self) -> list[models.TagCount]:
		return await self.repo.list_tags(limit=10)

	async def stats(self) -> models.DiscussionStats:
		return await self.repo.stats()

	# --- Writes -----------------------------------------------------------

	async def create_post(
		self,
		viewer_id: int,
		*,
		title: Optional[str],
		content: Optional[str],
		category: Optional[str] = None,
		module_id: Optional[int] = None,
	) -> models.Post:
		title_text = _require_text(title, "title")
		content_text = _require_text(content, "content")
		await self.moderation.enforce(content_text)

		post = await self.repo.insert_post(
			student_id=viewer_id,
			title=title_text,
			content=content_text,
			category=(category or "").strip() or DEFAULT_CATEGORY,
			module_id=module_id or None,
		)
		obs_metrics.inc_post_created()
		logger.info("post_created", extra={"post_id": post.id, "module_id": module_id})

		await self.notifier.notify(
			NotificationType.DISCUSSION,
			post.id,
			notification_models.post_created_message(post.author.first_name, post.author.last_name, post.title),
		)
		return post

	async def add_comment(self, post_id: int, viewer_id: int, *, content: Optional[str]) -> models.Comment:
		content_text = _require_text(content, "content")
		comment = await self.repo.insert_comment(post_id=post_id, student_id=viewer_id, content=content_text)
		obs_metrics.inc_comment_created()

		await self.notifier.notify(
			NotificationType.COMMENT,
			post_id,
			notification_models.comment_added_message(comment.commenter.first_name, comment.commenter.last_name),
		)
		return comment

	async def toggle_like(self, post_id: int, viewer_id: int) -> models.LikeToggle:
		result = await self.repo.toggle_like(post_id=post_id, student_id=viewer_id)
		obs_metrics.inc_like_toggle(result.liked)
		if result.liked:
			liker = await self.repo.fetch_author(viewer_id)
			await self.notifier.notify(
				NotificationType.LIKE,
				post_id,
				notification_models.post_liked_message(liker.display_name if liker else None),
			)
		return result

	# --- Bookmarks --------------------------------------------------------

	async def toggle_saved(self, post_id: int, viewer_id: int) -> bool:
		return await self.repo.toggle_saved(post_id=post_id, student_id=viewer_id)

	async def list_saved(self, viewer_id: int) -> list[models.SavedPost]:
		return await self.repo.list_saved(viewer_id)
