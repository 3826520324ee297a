"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram

log = logging.getLogger(__name__)


REQUEST_COUNTER = Counter(
	"peerconnect_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"peerconnect_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

SOCKET_CLIENTS = Gauge(
	"peerconnect_socketio_clients",
	"Active Socket.IO clients per namespace",
	["namespace"],
)

SOCKET_EVENTS = Counter(
	"peerconnect_socketio_events_total",
	"Socket.IO events emitted per namespace",
	["namespace", "event"],
)

NOTIFICATIONS_PERSISTED = Counter(
	"peerconnect_notifications_persisted_total",
	"Notifications written to the store",
	["type"],
)

NOTIFICATION_PERSIST_FAILURES = Counter(
	"peerconnect_notification_persist_failures_total",
	"Committed writes whose notification row could not be stored",
	["type"],
)

NOTIFICATION_EMIT_FAILURES = Counter(
	"peerconnect_notification_emit_failures_total",
	"Realtime notification pushes that failed after persistence",
	["type"],
)

POSTS_CREATED = Counter(
	"peerconnect_posts_created_total",
	"Discussion posts created",
)

COMMENTS_CREATED = Counter(
	"peerconnect_comments_created_total",
	"Discussion comments created",
)

LIKE_TOGGLES = Counter(
	"peerconnect_like_toggles_total",
	"Like toggles by resulting state",
	["state"],
)

FEED_QUERIES = Counter(
	"peerconnect_feed_queries_total",
	"Feed queries by outcome",
	["result"],
)

MESSAGES_SENT = Counter(
	"peerconnect_messages_sent_total",
	"Direct messages persisted",
)

CONVERSATIONS_STARTED = Counter(
	"peerconnect_conversations_started_total",
	"Conversation start calls by outcome",
	["result"],
)

MODERATION_DECISIONS = Counter(
	"peerconnect_moderation_decisions_total",
	"Moderation gate outcomes",
	["source", "verdict"],
)

MATERIALS_UPLOADED = Counter(
	"peerconnect_materials_uploaded_total",
	"Study materials uploaded",
	["kind"],
)

MATERIAL_DOWNLOADS = Counter(
	"peerconnect_material_downloads_total",
	"Study material download attempts",
	["result"],
)

POSTGRES_UP = Gauge(
	"peerconnect_postgres_up",
	"Postgres readiness (1 healthy, 0 failing)",
)

POSTGRES_LATENCY = Histogram(
	"peerconnect_postgres_ping_seconds",
	"Readiness ping latency",
	buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route, method, str(status)).inc()
	REQUEST_LATENCY.labels(route, method).observe(elapsed_seconds)


def socket_connected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace).inc()


def socket_disconnected(namespace: str) -> None:
	SOCKET_CLIENTS.labels(namespace).dec()


def socket_event(namespace: str, event: str) -> None:
	SOCKET_EVENTS.labels(namespace, event).inc()


def notification_persisted(kind: str) -> None:
	NOTIFICATIONS_PERSISTED.labels(kind).inc()


def notification_persist_failed(kind: str) -> None:
	NOTIFICATION_PERSIST_FAILURES.labels(kind).inc()


def notification_emit_failed(kind: str) -> None:
	NOTIFICATION_EMIT_FAILURES.labels(kind).inc()


def inc_post_created() -> None:
	POSTS_CREATED.inc()


def inc_comment_created() -> None:
	COMMENTS_CREATED.inc()


def inc_like_toggle(liked: bool) -> None:
	LIKE_TOGGLES.labels("liked" if liked else "unliked").inc()


def inc_feed_query(result: str) -> None:
	FEED_QUERIES.labels(result).inc()


def inc_message_sent() -> None:
	MESSAGES_SENT.inc()


def inc_conversation_started(result: str) -> None:
	CONVERSATIONS_STARTED.labels(result).inc()


def inc_moderation_decision(source: str, allowed: bool) -> None:
	MODERATION_DECISIONS.labels(source, "allow" if allowed else "reject").inc()


def inc_material_uploaded(kind: str) -> None:
	MATERIALS_UPLOADED.labels(kind).inc()


def inc_material_download(result: str) -> None:
	MATERIAL_DOWNLOADS.labels(result).inc()


def mark_postgres(ok: bool, *, latency_seconds: float | None = None) -> None:
	POSTGRES_UP.set(1 if ok else 0)
	if latency_seconds is not None:
		POSTGRES_LATENCY.observe(latency_seconds)
