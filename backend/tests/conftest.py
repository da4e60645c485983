import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from httpx import ASGITransport, AsyncClient

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from bubbly.domain.realtime import sockets
from bubbly.infra import postgres
from bubbly.infra.jwt import encode_access
from bubbly.main import app
from bubbly.settings import settings


if hasattr(asyncio, "WindowsSelectorEventLoopPolicy"):
	asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from bubbly.infra.redis import redis_client, set_redis_client
	original = redis_client.client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		set_redis_client(original)
		await client.flushall()


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Most API tests authenticate via X-User-Id, which is only accepted in dev mode."""
	original_env = settings.environment
	settings.environment = "dev"
	try:
		yield
	finally:
		settings.environment = original_env


@pytest.fixture(autouse=True)
def detached_namespace():
	"""Services push through the module-level namespace; keep it unset unless a test installs one."""
	original = sockets.get_namespace()
	sockets.set_namespace(None)
	try:
		yield
	finally:
		sockets.set_namespace(original)


@pytest.fixture
def make_token():
	def _make(user_id: str, **claims) -> str:
		return encode_access({"sub": user_id, **claims})

	return _make


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client


@pytest.fixture
def world():
	from fakes import World

	world = World()
	for user_id in ("alice", "bob", "carol", "dave"):
		world.add_user(user_id)
	return world


@pytest.fixture
def notification_repo(world):
	from fakes import FakeNotificationRepo

	return FakeNotificationRepo(world)


@pytest.fixture
def reaction_repo(world):
	from fakes import FakeReactionRepo

	return FakeReactionRepo(world)


@pytest.fixture
def search_repo(world):
	from fakes import FakeSearchRepo

	return FakeSearchRepo(world)


@pytest.fixture
def comment_repo(world):
	from fakes import FakeCommentRepo

	return FakeCommentRepo(world)


@pytest.fixture
def chat_repo(world):
	from fakes import FakeChatRepo

	return FakeChatRepo(world)


@pytest.fixture
def pushes(monkeypatch):
	"""Capture every server push as ``(user_id, event, payload)``."""
	captured = []

	async def _capture(user_id, event, payload):
		captured.append((user_id, event, payload))

	monkeypatch.setattr(sockets, "emit_to_user", _capture)
	return captured
