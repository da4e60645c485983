"""In-process map of which users have live socket connections."""

from __future__ import annotations

from typing import Dict, Set


class PresenceRegistry:
	"""``user_id -> {sid}`` multimap.

	Every method is synchronous so a check and its mutation never straddle an
	``await``; two connections for the same user cannot both observe the
	offline to online transition.
	"""

	def __init__(self) -> None:
		self._connections: Dict[str, Set[str]] = {}

	def add_connection(self, user_id: str, sid: str) -> bool:
		"""Record ``sid``; True when this is the user's first live connection."""
		sids = self._connections.get(user_id)
		if sids is None:
			self._connections[user_id] = {sid}
			return True
		sids.add(sid)
		return False

	def remove_connection(self, user_id: str, sid: str) -> bool:
		"""Forget ``sid``; True when the user has no connections left."""
		sids = self._connections.get(user_id)
		if sids is None or sid not in sids:
			return False
		sids.discard(sid)
		if sids:
			return False
		del self._connections[user_id]
		return True

	def is_online(self, user_id: str) -> bool:
		return user_id in self._connections

	def connection_count(self, user_id: str) -> int:
		return len(self._connections.get(user_id, ()))

	def online_user_ids(self) -> Set[str]:
		return set(self._connections)

	def __len__(self) -> int:
		return len(self._connections)
