"""Socket.IO namespace for presence, typing, chat relay and server pushes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import parse_qs

import socketio

from bubbly.domain.realtime import events
from bubbly.domain.realtime.presence import PresenceRegistry
from bubbly.infra.auth import AuthenticatedUser, InvalidToken, decode_user_token
from bubbly.infra.rate_limit import allow as rate_allow
from bubbly.obs import metrics as obs_metrics
from bubbly.settings import settings

logger = logging.getLogger(__name__)

RELAY_WINDOW_SECONDS = 10

_namespace: "RealtimeNamespace" | None = None


def _header(scope: dict, name: str) -> Optional[str]:
	target = name.encode().lower()
	for key, value in scope.get("headers", []):
		if key.lower() == target:
			return value.decode()
	return None


def _extract_token(scope: dict, auth: Optional[dict]) -> Optional[str]:
	if isinstance(auth, dict) and auth.get("token"):
		return str(auth["token"])
	authorization = _header(scope, "authorization")
	if authorization and authorization.lower().startswith("bearer "):
		return authorization.split(" ", 1)[1].strip()
	raw_query = scope.get("query_string") or b""
	if isinstance(raw_query, bytes):
		raw_query = raw_query.decode()
	values = parse_qs(raw_query).get("token")
	return values[0] if values else None


def user_room(user_id: str) -> str:
	return str(user_id)


def _str_field(data: Any, key: str) -> Optional[str]:
	if not isinstance(data, dict):
		return None
	value = data.get(key)
	if value is None or value == "":
		return None
	return str(value)


class RealtimeNamespace(socketio.AsyncNamespace):
	"""Root namespace; every client sits in a room named after its user id."""

	def __init__(self, namespace: str = "/") -> None:
		super().__init__(namespace)
		self.presence = PresenceRegistry()
		self.sessions: Dict[str, AuthenticatedUser] = {}

	async def trigger_event(self, event: str, *args):
		# Client event names are hyphenated (``typing-start``); handlers are not.
		return await super().trigger_event((event or "").replace("-", "_"), *args)

	async def on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None) -> None:
		scope = environ.get("asgi.scope", environ)
		token = _extract_token(scope, auth or environ.get("auth"))
		try:
			user = decode_user_token(token or "")
		except InvalidToken:
			obs_metrics.socket_reject(self.namespace, "unauthorized")
			raise ConnectionRefusedError("unauthorized") from None

		# Registry bookkeeping happens before the first await.
		self.sessions[sid] = user
		came_online = self.presence.add_connection(user.id, sid)
		obs_metrics.socket_connected(self.namespace)
		obs_metrics.presence_online(len(self.presence))
		try:
			await self.enter_room(sid, user_room(user.id))
		except ValueError:
			logger.debug("realtime connect room attach failed sid=%s", sid, exc_info=True)
		logger.info("realtime connect sid=%s user=%s", sid, user.id)
		if came_online:
			obs_metrics.presence_transition(True)
			await self._broadcast_status(user.id, True)

	async def on_disconnect(self, sid: str, reason: Optional[str] = None) -> None:
		user = self.sessions.pop(sid, None)
		if user is None:
			return
		went_offline = self.presence.remove_connection(user.id, sid)
		obs_metrics.socket_disconnected(self.namespace)
		obs_metrics.presence_online(len(self.presence))
		logger.info("realtime disconnect sid=%s user=%s reason=%s", sid, user.id, reason)
		if went_offline:
			obs_metrics.presence_transition(False)
			await self._broadcast_status(user.id, False)

	async def on_typing_start(self, sid: str, data: Any = None) -> None:
		await self._relay_typing(sid, data, events.TYPING_START, events.USER_TYPING)

	async def on_typing_stop(self, sid: str, data: Any = None) -> None:
		await self._relay_typing(sid, data, events.TYPING_STOP, events.USER_STOPPED_TYPING)

	async def on_send_message(self, sid: str, data: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, events.SEND_MESSAGE)
		user = self._session(sid, events.SEND_MESSAGE)
		if user is None:
			return
		recipient_id = _str_field(data, "recipientId")
		message = data.get("message") if isinstance(data, dict) else None
		if recipient_id is None or not isinstance(message, dict):
			logger.info("realtime invalid payload event=%s sid=%s", events.SEND_MESSAGE, sid)
			return
		if not await self._within_budget("socket_message", user.id, settings.socket_messages_per_10s):
			return
		await self.emit(events.NEW_MESSAGE, message, room=user_room(recipient_id))

	async def on_mark_read(self, sid: str, data: Any = None) -> None:
		obs_metrics.socket_event(self.namespace, events.MARK_READ)
		user = self._session(sid, events.MARK_READ)
		if user is None:
			return
		conversation_id = _str_field(data, "conversationId")
		other_user_id = _str_field(data, "otherUserId")
		if conversation_id is None or other_user_id is None:
			logger.info("realtime invalid payload event=%s sid=%s", events.MARK_READ, sid)
			return
		await self.emit(
			events.MESSAGES_READ,
			{"conversationId": conversation_id, "userId": user.id},
			room=user_room(other_user_id),
		)

	async def _relay_typing(self, sid: str, data: Any, incoming: str, outgoing: str) -> None:
		obs_metrics.socket_event(self.namespace, incoming)
		user = self._session(sid, incoming)
		if user is None:
			return
		conversation_id = _str_field(data, "conversationId")
		other_user_id = _str_field(data, "otherUserId")
		if conversation_id is None or other_user_id is None:
			logger.info("realtime invalid payload event=%s sid=%s", incoming, sid)
			return
		if not await self._within_budget("socket_typing", user.id, settings.socket_typing_per_10s):
			return
		await self.emit(
			outgoing,
			{"conversationId": conversation_id, "userId": user.id},
			room=user_room(other_user_id),
		)

	def _session(self, sid: str, event: str) -> Optional[AuthenticatedUser]:
		user = self.sessions.get(sid)
		if user is None:
			obs_metrics.socket_reject(self.namespace, "unauthenticated")
			logger.info("realtime event from unknown sid event=%s sid=%s", event, sid)
		return user

	async def _within_budget(self, kind: str, user_id: str, limit: int) -> bool:
		if await rate_allow(kind, user_id, limit=limit, window_seconds=RELAY_WINDOW_SECONDS):
			return True
		obs_metrics.inc_rate_limited(kind)
		return False

	async def _broadcast_status(self, user_id: str, online: bool) -> None:
		obs_metrics.socket_event(self.namespace, events.USER_STATUS)
		try:
			await self.emit(events.USER_STATUS, {"userId": user_id, "isOnline": online})
		except Exception:
			logger.warning("realtime status broadcast failed user=%s online=%s", user_id, online, exc_info=True)


def set_namespace(ns: Optional[RealtimeNamespace]) -> None:
	global _namespace
	_namespace = ns


def get_namespace() -> Optional[RealtimeNamespace]:
	return _namespace


def is_online(user_id: str) -> bool:
	if _namespace is None:
		return False
	return _namespace.presence.is_online(str(user_id))


async def emit_to_user(user_id: str, event: str, payload: Any) -> None:
	"""Best-effort push to every connection of ``user_id``; failures are logged."""
	if _namespace is None:
		return
	obs_metrics.socket_event(_namespace.namespace, event)
	try:
		await _namespace.emit(event, payload, room=user_room(user_id))
	except Exception:
		logger.warning("realtime emit failed event=%s user=%s", event, user_id, exc_info=True)


async def emit_new_message(recipient_id: str, payload: dict) -> None:
	await emit_to_user(recipient_id, events.NEW_MESSAGE, payload)


async def emit_messages_read(user_id: str, conversation_id: str, reader_id: str) -> None:
	await emit_to_user(user_id, events.MESSAGES_READ, {"conversationId": conversation_id, "userId": reader_id})


async def emit_new_share(owner_id: str, payload: dict) -> None:
	await emit_to_user(owner_id, events.NEW_SHARE, payload)


async def emit_new_notification(recipient_id: str, payload: dict) -> None:
	await emit_to_user(recipient_id, events.NEW_NOTIFICATION, payload)
