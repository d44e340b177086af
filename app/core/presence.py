"""
Presence registry.

In-process map of user_id (str) → connection_id (str) for users with a
live, identified WebSocket. Single server process only; cleared on restart.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class PresenceRegistry:
    """
    One active connection per user. Last join wins.

    Removal on disconnect is conditional: an entry is only dropped if it
    still points at the disconnecting connection, so a late disconnect from
    a displaced connection cannot evict the user's newer one.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def set(self, user_id: str, connection_id: str) -> None:
        previous = self._entries.get(user_id)
        if previous is not None and previous != connection_id:
            logger.info(
                "Presence replaced: user_id=%s old=%s new=%s",
                user_id,
                previous,
                connection_id,
            )
        self._entries[user_id] = connection_id

    def get(self, user_id: str) -> str | None:
        return self._entries.get(user_id)

    def remove_if_matches(self, user_id: str, connection_id: str) -> bool:
        """Remove the entry for user_id only if it maps to connection_id."""
        if self._entries.get(user_id) != connection_id:
            return False
        del self._entries[user_id]
        return True

    def remove_by_connection(self, connection_id: str) -> list[str]:
        """
        Drop every entry pointing at connection_id.

        Linear scan; used when the caller does not know which user the
        connection was joined under. Returns the removed user ids.
        """
        matches = [
            user_id
            for user_id, current in self._entries.items()
            if current == connection_id
        ]
        return [
            user_id
            for user_id in matches
            if self.remove_if_matches(user_id, connection_id)
        ]

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def connected_user_ids(self) -> list[str]:
        return list(self._entries.keys())
