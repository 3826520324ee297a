import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Settings require a signing secret at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-peerconnect-suite")

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from peerconnect.domain.discussions import models as discussion_models
from peerconnect.domain.errors import NotFoundError
from peerconnect.domain.messaging.models import ConversationKey, Message
from peerconnect.domain.notifications.models import NotificationRecord
from peerconnect.infra import postgres
from peerconnect.main import app
from peerconnect.settings import settings

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Run every test in dev mode so X-User-Id / socket userId are accepted."""
	original_env = settings.environment
	original_ai = settings.moderation_ai_enabled
	settings.environment = "dev"
	settings.moderation_ai_enabled = False
	try:
		yield
	finally:
		settings.environment = original_env
		settings.moderation_ai_enabled = original_ai


@pytest.fixture(autouse=True)
def clear_overrides():
	try:
		yield
	finally:
		app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


class FakeChannels:
	"""Records broadcasts and room emits instead of touching Socket.IO."""

	def __init__(self) -> None:
		self.broadcasts: list[tuple[str, object]] = []
		self.room_emits: list[tuple[int, str, object]] = []
		self.fail = False
		self.log: Optional[list[str]] = None

	async def broadcast(self, event: str, payload: object) -> None:
		if self.log is not None:
			self.log.append(f"emit:{event}")
		if self.fail:
			raise RuntimeError("socket down")
		self.broadcasts.append((event, payload))

	async def emit_to_conversation(self, conversation_id: int, event: str, payload: object) -> None:
		if self.fail:
			raise RuntimeError("socket down")
		self.room_emits.append((conversation_id, event, payload))


class FakeNotificationsRepo:
	def __init__(self) -> None:
		self.records: list[NotificationRecord] = []
		self.fail = False
		self.log: Optional[list[str]] = None

	async def insert(self, *, type: str, ref_id: int | None, message: str) -> NotificationRecord:
		if self.log is not None:
			self.log.append(f"persist:{type}")
		if self.fail:
			raise RuntimeError("insert failed")
		record = NotificationRecord(
			id=len(self.records) + 1,
			type=type,
			ref_id=ref_id,
			message=message,
			created_at=BASE_TIME,
			read=False,
		)
		self.records.append(record)
		return record

	async def list_recent(self, *, limit: int = 100) -> list[NotificationRecord]:
		return list(reversed(self.records))[:limit]

	async def set_read(self, notification_id: int, read: bool) -> NotificationRecord | None:
		for idx, record in enumerate(self.records):
			if record.id == notification_id:
				updated = record.model_copy(update={"read": read})
				self.records[idx] = updated
				return updated
		return None

	async def mark_all_read(self) -> int:
		count = sum(1 for record in self.records if not record.read)
		self.records = [record.model_copy(update={"read": True}) for record in self.records]
		return count


class FakeGrants:
	def __init__(self, subscribed: dict[int, list[int]] | None = None, enrolled: dict[int, list[int]] | None = None) -> None:
		self.subscribed = subscribed or {}
		self.enrolled = enrolled or {}
		self.calls = 0

	async def list_subscribed_module_ids(self, viewer_id: int) -> list[int]:
		self.calls += 1
		return list(self.subscribed.get(viewer_id, []))

	async def list_enrolled_module_ids(self, viewer_id: int) -> list[int]:
		self.calls += 1
		return list(self.enrolled.get(viewer_id, []))


STUDENTS = {
	1: ("Ada", "Lovelace"),
	2: ("Alan", "Turing"),
	3: ("Grace", "Hopper"),
}


class FakeDiscussionsRepo:
	"""In-memory discussions store mirroring the SQL semantics."""

	def __init__(self) -> None:
		self.posts: dict[int, dict] = {}
		self.comments: list[dict] = []
		self.likes: set[tuple[int, int]] = set()
		self.saved: dict[tuple[int, int], int] = {}
		self.save_seq = 0
		self.list_calls = 0

	def add_post(
		self,
		post_id: int,
		*,
		module_id: int | None = None,
		minutes: int = 0,
		title: str | None = None,
		category: str = "General",
		student_id: int = 1,
		likes: int = 0,
		views: int = 0,
	) -> None:
		self.posts[post_id] = {
			"id": post_id,
			"title": title or f"Post {post_id}",
			"content": f"Content {post_id}",
			"category": category,
			"created_at": BASE_TIME + timedelta(minutes=minutes),
			"likes": likes,
			"views": views,
			"student_id": student_id,
			"module_id": module_id,
		}

	def _to_post(self, row: dict) -> discussion_models.Post:
		first, last = STUDENTS.get(row["student_id"], (None, None))
		module_id = row["module_id"]
		return discussion_models.Post.from_row(
			{
				**row,
				"author_first_name": first,
				"author_last_name": last,
				"author_avatar": None,
				"module_name": f"Module {module_id}" if module_id else None,
				"module_code": f"M{module_id}" if module_id else None,
			}
		)

	async def list_posts(self, query) -> list[discussion_models.Post]:
		self.list_calls += 1
		visible = []
		for row in self.posts.values():
			if row["module_id"] is None:
				if not query.include_general:
					continue
			elif row["module_id"] not in query.scopes:
				continue
			if query.filters.category and row["category"] != query.filters.category:
				continue
			if query.filters.search:
				needle = query.filters.search.lower()
				if needle not in row["title"].lower() and needle not in row["content"].lower():
					continue
			visible.append(row)
		visible.sort(key=lambda row: (row[query.sort], row["id"]), reverse=True)
		page = visible[query.pagination.offset : query.pagination.offset + query.pagination.size]
		return [self._to_post(row) for row in page]

	async def fetch_post_and_count_view(self, post_id: int) -> discussion_models.Post | None:
		row = self.posts.get(post_id)
		if row is None:
			return None
		row["views"] += 1
		return self._to_post(row)

	async def list_comments(self, post_id: int) -> list[discussion_models.Comment]:
		rows = sorted((c for c in self.comments if c["discussion_id"] == post_id), key=lambda c: (c["created_at"], c["id"]))
		return [discussion_models.Comment.from_row(row) for row in rows]

	async def insert_post(self, *, student_id, title, content, category, module_id) -> discussion_models.Post:
		post_id = max(self.posts, default=0) + 1
		self.add_post(post_id, module_id=module_id, minutes=post_id, title=title, category=category, student_id=student_id)
		self.posts[post_id]["content"] = content
		return self._to_post(self.posts[post_id])

	async def insert_comment(self, *, post_id: int, student_id: int, content: str) -> discussion_models.Comment:
		if post_id not in self.posts:
			raise NotFoundError("Post not found")
		first, last = STUDENTS.get(student_id, (None, None))
		row = {
			"id": len(self.comments) + 1,
			"discussion_id": post_id,
			"student_id": student_id,
			"content": content,
			"created_at": BASE_TIME + timedelta(minutes=len(self.comments)),
			"commenter_first_name": first,
			"commenter_last_name": last,
			"commenter_avatar": None,
		}
		self.comments.append(row)
		return discussion_models.Comment.from_row(row)

	async def toggle_like(self, *, post_id: int, student_id: int) -> discussion_models.LikeToggle:
		row = self.posts.get(post_id)
		if row is None:
			raise NotFoundError("Post not found")
		key = (post_id, student_id)
		if key in self.likes:
			self.likes.discard(key)
			row["likes"] = max(row["likes"] - 1, 0)
			return discussion_models.LikeToggle(liked=False, likes=row["likes"])
		self.likes.add(key)
		row["likes"] += 1
		return discussion_models.LikeToggle(liked=True, likes=row["likes"])

	async def fetch_author(self, student_id: int) -> discussion_models.Author | None:
		if student_id not in STUDENTS:
			return None
		first, last = STUDENTS[student_id]
		return discussion_models.Author(id=student_id, first_name=first, last_name=last)

	async def list_trending(self, *, limit: int = 5) -> list[discussion_models.TrendingPost]:
		rows = sorted(self.posts.values(), key=lambda row: (row["views"] + row["likes"], row["id"]), reverse=True)
		return [
			discussion_models.TrendingPost(
				id=row["id"],
				title=row["title"],
				views=row["views"],
				likes=row["likes"],
				author=self._to_post(row).author,
			)
			for row in rows[:limit]
		]

	async def toggle_saved(self, *, post_id: int, student_id: int) -> bool:
		if post_id not in self.posts:
			raise NotFoundError("Post not found")
		key = (student_id, post_id)
		if key in self.saved:
			del self.saved[key]
			return False
		self.save_seq += 1
		self.saved[key] = self.save_seq
		return True

	async def list_saved(self, student_id: int) -> list[discussion_models.SavedPost]:
		mine = sorted(
			((save_id, post_id) for (sid, post_id), save_id in self.saved.items() if sid == student_id),
			reverse=True,
		)
		return [
			discussion_models.SavedPost(
				id=post_id,
				title=self.posts[post_id]["title"],
				content=self.posts[post_id]["content"],
				category=self.posts[post_id]["category"],
				created_at=self.posts[post_id]["created_at"],
				save_id=save_id,
				saved_at=BASE_TIME + timedelta(seconds=save_id),
			)
			for save_id, post_id in mine
		]

	async def list_tags(self, *, limit: int = 10) -> list[discussion_models.TagCount]:
		counts: dict[str, int] = {}
		for row in self.posts.values():
			counts[row["category"]] = counts.get(row["category"], 0) + 1
		ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
		return [discussion_models.TagCount(tag=tag, count=count) for tag, count in ordered[:limit]]

	async def stats(self) -> discussion_models.DiscussionStats:
		return discussion_models.DiscussionStats(
			posts=len(self.posts),
			comments=len(self.comments),
			views=sum(row["views"] for row in self.posts.values()),
			likes=sum(row["likes"] for row in self.posts.values()),
		)


class FakeMessagingRepo:
	def __init__(self) -> None:
		self.conversations: dict[tuple[int, int], int] = {}
		self.messages: list[Message] = []

	async def get_or_create_conversation(self, key: ConversationKey) -> tuple[int, bool]:
		pair = key.participants()
		if pair in self.conversations:
			return self.conversations[pair], False
		self.conversations[pair] = len(self.conversations) + 100
		return self.conversations[pair], True

	async def get_conversation(self, conversation_id: int) -> ConversationKey | None:
		for (low, high), cid in self.conversations.items():
			if cid == conversation_id:
				return ConversationKey(user_low=low, user_high=high)
		return None

	async def insert_message(self, *, conversation_id: int, sender_id: int, content: str) -> Message:
		message = Message(
			id=len(self.messages) + 1,
			conversation_id=conversation_id,
			sender_id=sender_id,
			content=content,
			created_at=BASE_TIME + timedelta(seconds=len(self.messages)),
		)
		self.messages.append(message)
		return message

	async def list_messages(self, conversation_id: int) -> list[Message]:
		return [message for message in self.messages if message.conversation_id == conversation_id]

	async def list_conversations(self, viewer_id: int):
		return []


@pytest.fixture
def fake_channels() -> FakeChannels:
	return FakeChannels()


@pytest.fixture
def fake_notifications_repo() -> FakeNotificationsRepo:
	return FakeNotificationsRepo()


@pytest.fixture
def fake_discussions_repo() -> FakeDiscussionsRepo:
	return FakeDiscussionsRepo()


@pytest.fixture
def fake_messaging_repo() -> FakeMessagingRepo:
	return FakeMessagingRepo()


@pytest.fixture
def make_grants():
	return FakeGrants
