"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from peerconnect.api import (
	discussions,
	messages,
	modules,
	notifications,
	ops,
	saved,
	study_materials,
	users,
)
from peerconnect.api.errors import install_error_handlers
from peerconnect.infra import postgres
from peerconnect.obs import init as obs_init
from peerconnect.realtime.channels import RealtimeChannelManager
from peerconnect.realtime.namespace import PeerConnectNamespace
from peerconnect.settings import settings

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
	await postgres.init_pool()
	app.state.http = httpx.AsyncClient(timeout=settings.moderation_timeout_seconds)
	try:
		yield
	finally:
		await app.state.http.aclose()
		await postgres.close_pool()


app = FastAPI(title="PeerConnect API", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(getattr(settings, "cors_allow_origins", []))
if not allow_origins:
	allow_origins = ["http://localhost:3000"] if settings.is_dev() else []

# Starlette disallows wildcard '*' with allow_credentials=True. Replace '*' with explicit origins.
if "*" in allow_origins:
	allow_origins = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"] if settings.is_dev() else []

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

# Use the same allowed origins for Socket.IO as for the REST API
sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=allow_origins)
channels = RealtimeChannelManager(sio)
sio.register_namespace(PeerConnectNamespace(channels))
app.state.channels = channels
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)
obs_init(app)

app.include_router(discussions.router, prefix=API_PREFIX)
app.include_router(saved.router, prefix=API_PREFIX)
app.include_router(notifications.router, prefix=API_PREFIX)
app.include_router(messages.router, prefix=API_PREFIX)
app.include_router(modules.router, prefix=API_PREFIX)
app.include_router(study_materials.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(ops.router)


__all__ = ["app", "socket_app", "sio", "channels"]
