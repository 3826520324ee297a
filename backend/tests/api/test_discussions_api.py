import pytest

from peerconnect.api.deps import get_discussion_service
from peerconnect.domain.discussions.service import DiscussionService
from peerconnect.domain.discussions.visibility import VisibilityResolver
from peerconnect.domain.moderation.gate import ModerationGate
from peerconnect.domain.moderation.keywords import KeywordGate
from peerconnect.domain.notifications.notifier import EventNotifier
from peerconnect.infra.jwt import encode_access
from peerconnect.main import app
from peerconnect.settings import DEFAULT_BANNED_KEYWORDS


@pytest.fixture
def discussion_service(fake_discussions_repo, fake_notifications_repo, fake_channels, make_grants):
	service = DiscussionService(
		fake_discussions_repo,
		VisibilityResolver(make_grants(enrolled={1: [7]})),
		EventNotifier(fake_notifications_repo, fake_channels),
		ModerationGate(KeywordGate(DEFAULT_BANNED_KEYWORDS)),
		fake_channels,
	)
	app.dependency_overrides[get_discussion_service] = lambda: service
	return service


@pytest.mark.asyncio
async def test_feed_requires_authentication(api_client, discussion_service):
	resp = await api_client.get("/api/discussions/posts")

	assert resp.status_code == 401
	body = resp.json()
	assert body["success"] is False
	assert body["detail"] == "no_token"


@pytest.mark.asyncio
async def test_feed_with_dev_header_respects_scopes(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(1, module_id=7, minutes=1)
	fake_discussions_repo.add_post(2, module_id=8, minutes=2)
	fake_discussions_repo.add_post(3, module_id=None, minutes=3)

	resp = await api_client.get("/api/discussions/posts", headers={"X-User-Id": "1"})

	assert resp.status_code == 200
	assert [post["id"] for post in resp.json()["posts"]] == [3, 1]

	scoped = await api_client.get(
		"/api/discussions/posts",
		params={"include_general": "false"},
		headers={"X-User-Id": "1"},
	)
	assert [post["id"] for post in scoped.json()["posts"]] == [1]


@pytest.mark.asyncio
async def test_feed_accepts_bearer_token(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(1, module_id=7)
	token = encode_access({"sub": "1"})

	resp = await api_client.get("/api/discussions/posts", headers={"Authorization": f"Bearer {token}"})

	assert resp.status_code == 200
	assert len(resp.json()["posts"]) == 1


@pytest.mark.asyncio
async def test_invalid_bearer_token_is_rejected(api_client, discussion_service):
	resp = await api_client.get("/api/discussions/posts", headers={"Authorization": "Bearer not-a-jwt"})

	assert resp.status_code == 401
	assert resp.json()["detail"] == "invalid_token"


@pytest.mark.asyncio
async def test_moderation_rejection_envelope(api_client, discussion_service, fake_discussions_repo):
	resp = await api_client.post(
		"/api/discussions/posts",
		json={"title": "Weekend", "content": "Football and pizza on Saturday"},
		headers={"X-User-Id": "1", "X-Request-Id": "req-moderation-1"},
	)

	assert resp.status_code == 400
	body = resp.json()
	assert body["success"] is False
	assert body["message"] == "Post rejected by moderation"
	assert body["reason"] == "Off-topic keyword detected (not school related)"
	assert body["categories"] == ["football", "pizza"]
	assert body["request_id"] == "req-moderation-1"
	assert resp.headers["X-Request-Id"] == "req-moderation-1"
	assert fake_discussions_repo.posts == {}


@pytest.mark.asyncio
async def test_missing_title_reports_field(api_client, discussion_service):
	resp = await api_client.post(
		"/api/discussions/posts",
		json={"content": "Notes"},
		headers={"X-User-Id": "1"},
	)

	assert resp.status_code == 400
	body = resp.json()
	assert body["message"] == "Missing required fields"
	assert body["field"] == "title"


@pytest.mark.asyncio
async def test_create_post_returns_post(api_client, discussion_service, fake_channels):
	resp = await api_client.post(
		"/api/discussions/posts",
		json={"title": "Midterm prep", "content": "Sharing my revision plan", "moduleId": 7},
		headers={"X-User-Id": "2"},
	)

	assert resp.status_code == 200
	post = resp.json()["post"]
	assert post["author"]["first_name"] == "Alan"
	assert post["module"]["id"] == 7
	assert fake_channels.broadcasts[0][1]["message"] == "📝 Alan Turing created a new post: Midterm prep"


@pytest.mark.asyncio
async def test_like_toggle_round_trip(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(4, likes=2)
	headers = {"X-User-Id": "3"}

	liked = await api_client.post("/api/discussions/posts/4/like", headers=headers)
	unliked = await api_client.post("/api/discussions/posts/4/like", headers=headers)

	assert liked.json() == {"success": True, "liked": True, "likes": 3}
	assert unliked.json() == {"success": True, "liked": False, "likes": 2}


@pytest.mark.asyncio
async def test_get_missing_post_is_404(api_client, discussion_service):
	resp = await api_client.get("/api/discussions/posts/999", headers={"X-User-Id": "1"})

	assert resp.status_code == 404
	assert resp.json()["message"] == "Post not found"


@pytest.mark.asyncio
async def test_get_post_includes_comments(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(5)
	await api_client.post(
		"/api/discussions/posts/5/comments",
		json={"content": "Great summary"},
		headers={"X-User-Id": "2"},
	)

	resp = await api_client.get("/api/discussions/posts/5", headers={"X-User-Id": "1"})

	body = resp.json()
	assert body["post"]["views"] == 1
	assert [comment["content"] for comment in body["comments"]] == ["Great summary"]


@pytest.mark.asyncio
async def test_saved_toggle_and_listing(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(6, title="Past papers")
	headers = {"X-User-Id": "2"}

	saved = await api_client.post("/api/saved/toggle", json={"discussion_id": 6}, headers=headers)
	listing = await api_client.get("/api/saved/my", headers=headers)
	unsaved = await api_client.post("/api/saved/toggle", json={"discussionId": 6}, headers=headers)
	empty = await api_client.get("/api/saved/my", headers=headers)

	assert saved.json() == {"success": True, "saved": True}
	assert [item["title"] for item in listing.json()["saved_posts"]] == ["Past papers"]
	assert unsaved.json() == {"success": True, "saved": False}
	assert empty.json()["saved_posts"] == []


@pytest.mark.asyncio
async def test_saved_toggle_requires_discussion_id(api_client, discussion_service):
	resp = await api_client.post("/api/saved/toggle", json={}, headers={"X-User-Id": "2"})

	assert resp.status_code == 400
	assert resp.json()["field"] == "discussion_id"


@pytest.mark.asyncio
async def test_tags_endpoint(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(1, category="Exams")
	fake_discussions_repo.add_post(2, category="Exams")
	fake_discussions_repo.add_post(3, category="General")

	resp = await api_client.get("/api/discussions/tags")

	assert resp.json() == {
		"success": True,
		"tags": [{"tag": "Exams", "count": 2}, {"tag": "General", "count": 1}],
	}


@pytest.mark.asyncio
async def test_stats_endpoint(api_client, discussion_service, fake_discussions_repo):
	fake_discussions_repo.add_post(1, views=3, likes=2)

	resp = await api_client.get("/api/discussions/stats")

	assert resp.json() == {"success": True, "stats": {"posts": 1, "comments": 0, "views": 3, "likes": 2}}
