"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bubbly.api import comments, follows, messages, notifications, ops, posts, reactions, search, shares
from bubbly.api.errors import install_error_handlers
from bubbly.api.request_id import RequestIdMiddleware
from bubbly.domain.realtime.sockets import RealtimeNamespace, set_namespace
from bubbly.infra import postgres
from bubbly.obs import init as obs_init
from bubbly.settings import settings

DEV_ORIGINS = [
	"http://localhost:3000",
	"http://127.0.0.1:3000",
	"http://localhost:5173",
	"http://127.0.0.1:5173",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
	await postgres.init_pool()
	try:
		yield
	finally:
		await postgres.close_pool()


app = FastAPI(title="Bubbly API", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins or "*" in allow_origins:
	# Starlette disallows '*' together with allow_credentials=True.
	allow_origins = DEV_ORIGINS if settings.is_dev() else [origin for origin in allow_origins if origin != "*"]

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=allow_origins)
realtime_namespace = RealtimeNamespace()
sio.register_namespace(realtime_namespace)
set_namespace(realtime_namespace)
socket_app = socketio.ASGIApp(sio, other_asgi_app=app)
obs_init(app)

app.add_middleware(RequestIdMiddleware)

app.include_router(posts.router, tags=["posts"])
app.include_router(shares.router, tags=["shares"])
app.include_router(reactions.post_router, tags=["reactions"])
app.include_router(reactions.share_router, tags=["reactions"])
app.include_router(comments.router, tags=["comments"])
app.include_router(follows.router, tags=["follows"])
app.include_router(messages.router, tags=["messages"])
app.include_router(notifications.router, tags=["notifications"])
app.include_router(search.router, tags=["search"])
app.include_router(ops.router, tags=["ops"])
