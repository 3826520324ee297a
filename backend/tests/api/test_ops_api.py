import pytest

from peerconnect.settings import settings


@pytest.mark.asyncio
async def test_liveness(api_client):
	resp = await api_client.get("/health/live")

	assert resp.status_code == 200
	assert resp.json() == {"status": "ok"}
	assert resp.headers.get("X-Request-Id")


@pytest.mark.asyncio
async def test_request_id_is_echoed(api_client):
	resp = await api_client.get("/health/live", headers={"X-Request-Id": "abc-123"})

	assert resp.headers["X-Request-Id"] == "abc-123"


@pytest.mark.asyncio
async def test_metrics_fail_closed_without_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_metrics_public", False)
	monkeypatch.setattr(settings, "obs_admin_token", None)

	resp = await api_client.get("/metrics")

	assert resp.status_code == 403
	assert resp.json()["detail"] == "admin_token_not_configured"


@pytest.mark.asyncio
async def test_metrics_with_admin_token(api_client, monkeypatch):
	monkeypatch.setattr(settings, "obs_metrics_public", False)
	monkeypatch.setattr(settings, "obs_admin_token", "ops-secret")

	denied = await api_client.get("/metrics", headers={"X-Admin-Token": "wrong"})
	allowed = await api_client.get("/metrics", headers={"X-Admin-Token": "ops-secret"})

	assert denied.status_code == 403
	assert allowed.status_code == 200
	assert "peerconnect_http_requests_total" in allowed.text


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(api_client):
	resp = await api_client.get("/api/does-not-exist")

	assert resp.status_code == 404
	body = resp.json()
	assert body["success"] is False
	assert "request_id" in body
