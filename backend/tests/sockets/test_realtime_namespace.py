from unittest.mock import AsyncMock

import pytest
import socketio

from bubbly.domain.realtime import sockets
from bubbly.domain.realtime.sockets import RealtimeNamespace
from bubbly.settings import settings


def _scope_with_authorization(token: str) -> dict:
	return {
		"headers": [(b"authorization", f"Bearer {token}".encode())],
	}


def _namespace() -> RealtimeNamespace:
	server = socketio.AsyncServer(async_mode="asgi")
	namespace = RealtimeNamespace()
	server.register_namespace(namespace)
	namespace.emit = AsyncMock()
	return namespace


async def _connect(namespace: RealtimeNamespace, sid: str, token: str) -> None:
	await namespace.trigger_event("connect", sid, {"asgi.scope": _scope_with_authorization(token)})


def _status_calls(namespace: RealtimeNamespace) -> list:
	return [call.args[1] for call in namespace.emit.await_args_list if call.args[0] == "user-status"]


@pytest.mark.asyncio
async def test_connect_requires_token():
	namespace = _namespace()

	with pytest.raises(ConnectionRefusedError):
		await namespace.trigger_event("connect", "sid-1", {"asgi.scope": {"headers": []}})
	with pytest.raises(ConnectionRefusedError):
		await _connect(namespace, "sid-2", "not-a-token")
	assert namespace.sessions == {}


@pytest.mark.asyncio
async def test_first_connection_broadcasts_online_once(make_token):
	namespace = _namespace()
	token = make_token("alice")

	await _connect(namespace, "sid-1", token)
	await _connect(namespace, "sid-2", token)

	assert namespace.sessions["sid-1"].id == "alice"
	assert namespace.presence.connection_count("alice") == 2
	assert _status_calls(namespace) == [{"userId": "alice", "isOnline": True}]


@pytest.mark.asyncio
async def test_token_accepted_from_auth_payload_and_query(make_token):
	namespace = _namespace()

	await namespace.trigger_event("connect", "sid-1", {"asgi.scope": {"headers": []}}, {"token": make_token("alice")})
	query = f"EIO=4&token={make_token('bob')}".encode()
	await namespace.trigger_event("connect", "sid-2", {"asgi.scope": {"headers": [], "query_string": query}})

	assert namespace.sessions["sid-1"].id == "alice"
	assert namespace.sessions["sid-2"].id == "bob"


@pytest.mark.asyncio
async def test_offline_broadcast_only_after_last_disconnect(make_token):
	namespace = _namespace()
	token = make_token("alice")
	await _connect(namespace, "sid-1", token)
	await _connect(namespace, "sid-2", token)

	await namespace.trigger_event("disconnect", "sid-1", "client disconnect")
	assert namespace.presence.is_online("alice")
	assert _status_calls(namespace) == [{"userId": "alice", "isOnline": True}]

	await namespace.trigger_event("disconnect", "sid-2", "client disconnect")
	assert not namespace.presence.is_online("alice")
	assert _status_calls(namespace)[-1] == {"userId": "alice", "isOnline": False}

	# A repeated disconnect for a forgotten sid is a no-op.
	await namespace.trigger_event("disconnect", "sid-2", "client disconnect")
	assert len(_status_calls(namespace)) == 2


@pytest.mark.asyncio
async def test_typing_events_relay_to_other_user(make_token):
	namespace = _namespace()
	await _connect(namespace, "sid-1", make_token("alice"))
	namespace.emit.reset_mock()

	await namespace.trigger_event("typing-start", "sid-1", {"conversationId": "c1", "otherUserId": "bob"})
	await namespace.trigger_event("typing-stop", "sid-1", {"conversationId": "c1", "otherUserId": "bob"})

	calls = [(call.args[0], call.args[1], call.kwargs.get("room")) for call in namespace.emit.await_args_list]
	assert calls == [
		("user-typing", {"conversationId": "c1", "userId": "alice"}, "bob"),
		("user-stopped-typing", {"conversationId": "c1", "userId": "alice"}, "bob"),
	]


@pytest.mark.asyncio
async def test_malformed_payloads_are_dropped(make_token):
	namespace = _namespace()
	await _connect(namespace, "sid-1", make_token("alice"))
	namespace.emit.reset_mock()

	await namespace.trigger_event("typing-start", "sid-1", {"conversationId": "c1"})
	await namespace.trigger_event("send-message", "sid-1", {"recipientId": "bob", "message": "plain text"})
	await namespace.trigger_event("mark-read", "sid-1", "nonsense")

	namespace.emit.assert_not_awaited()


@pytest.mark.asyncio
async def test_events_from_unknown_sid_are_ignored():
	namespace = _namespace()

	await namespace.trigger_event("send-message", "sid-9", {"recipientId": "bob", "message": {"id": "m1"}})

	namespace.emit.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_message_relay_and_budget(make_token, monkeypatch):
	monkeypatch.setattr(settings, "socket_messages_per_10s", 1)
	namespace = _namespace()
	await _connect(namespace, "sid-1", make_token("alice"))
	namespace.emit.reset_mock()

	message = {"id": "m1", "content": "hi"}
	await namespace.trigger_event("send-message", "sid-1", {"recipientId": "bob", "message": message})
	await namespace.trigger_event("send-message", "sid-1", {"recipientId": "bob", "message": message})

	namespace.emit.assert_awaited_once_with("new-message", message, room="bob")


@pytest.mark.asyncio
async def test_mark_read_relays_reader(make_token):
	namespace = _namespace()
	await _connect(namespace, "sid-1", make_token("bob"))
	namespace.emit.reset_mock()

	await namespace.trigger_event("mark-read", "sid-1", {"conversationId": "c1", "otherUserId": "alice"})

	namespace.emit.assert_awaited_once_with("messages-read", {"conversationId": "c1", "userId": "bob"}, room="alice")


@pytest.mark.asyncio
async def test_server_push_failures_are_swallowed(make_token):
	namespace = _namespace()
	await _connect(namespace, "sid-1", make_token("alice"))
	namespace.emit = AsyncMock(side_effect=RuntimeError("transport closed"))
	sockets.set_namespace(namespace)

	await sockets.emit_new_notification("alice", {"id": "n1"})

	namespace.emit.assert_awaited_once_with("new-notification", {"id": "n1"}, room="alice")
	assert sockets.is_online("alice")
	assert not sockets.is_online("bob")


@pytest.mark.asyncio
async def test_failed_status_broadcast_keeps_connection_consistent(make_token):
	namespace = _namespace()
	namespace.emit = AsyncMock(side_effect=RuntimeError("transport closed"))

	await _connect(namespace, "sid-1", make_token("alice"))
	assert namespace.sessions["sid-1"].id == "alice"

	await namespace.trigger_event("disconnect", "sid-1", "client disconnect")

	assert namespace.sessions == {}
	assert not namespace.presence.is_online("alice")
