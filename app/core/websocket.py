"""
WebSocket connection gateway.

Owns every live socket: accepts it, handles the client's `join`, and cleans
up presence on disconnect. Frames are JSON objects {"event": ..., "data": ...}.
Single server only; presence lives in the injected PresenceRegistry.
"""

from __future__ import annotations

import asyncio
import enum
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from app.core.exceptions import InvalidJoinRequest, InvalidMessage, RealtimeError
from app.core.presence import PresenceRegistry

logger = logging.getLogger(__name__)

# Wire event names
EVENT_JOIN = "join"
EVENT_JOINED = "joined"
EVENT_ERROR = "error"
EVENT_NEW_NOTIFICATION = "new_notification"


class ConnectionState(str, enum.Enum):
    CONNECTING = "CONNECTING"
    ANONYMOUS = "ANONYMOUS"
    IDENTIFIED = "IDENTIFIED"
    CLOSED = "CLOSED"


@dataclass
class Connection:
    """One accepted socket. Only the gateway holds a reference to it."""

    connection_id: str
    websocket: WebSocket
    established_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    state: ConnectionState = ConnectionState.CONNECTING
    user_id: str | None = None
    # Subject of the token presented at connect time, if any.
    authenticated_user_id: str | None = None


def _frame(event: str, data: Any) -> dict[str, Any]:
    return {"event": event, "data": jsonable_encoder(data)}


def _extract_user_id(data: Any) -> str:
    """Accept either a bare string or {"userId": ...} as the join payload."""
    if isinstance(data, dict):
        data = data.get("userId", data.get("user_id"))
    if not isinstance(data, str) or not data.strip():
        raise InvalidJoinRequest("join requires a non-empty userId")
    return data


class ConnectionGateway:
    """
    Maps connection_id → Connection and keeps the presence registry in sync.

    State per connection:
    CONNECTING → ANONYMOUS (accepted) → IDENTIFIED (joined) → CLOSED
    """

    def __init__(self, registry: PresenceRegistry) -> None:
        self._registry = registry
        self._connections: dict[str, Connection] = {}
        self._pending: set[asyncio.Task[bool]] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def on_connect(
        self,
        websocket: WebSocket,
        authenticated_user_id: str | None = None,
    ) -> str:
        connection = Connection(
            connection_id=uuid.uuid4().hex,
            websocket=websocket,
            authenticated_user_id=authenticated_user_id,
        )
        await websocket.accept()
        connection.state = ConnectionState.ANONYMOUS
        self._connections[connection.connection_id] = connection
        logger.info("WebSocket connected: connection_id=%s", connection.connection_id)
        return connection.connection_id

    async def on_join(self, connection_id: str, user_id: Any) -> None:
        """
        Register this connection as the user's active one and acknowledge.

        Raises InvalidJoinRequest (without touching presence) if user_id is
        missing or empty, or if the connection was opened with a token for a
        different user. Joining again is idempotent; joining as a different
        user releases the previous identity first.
        """
        user_id = _extract_user_id(user_id)
        connection = self._live(connection_id)
        if connection is None:
            raise InvalidJoinRequest("connection is not open")
        if (
            connection.authenticated_user_id is not None
            and connection.authenticated_user_id != user_id
        ):
            raise InvalidJoinRequest("userId does not match the authenticated user")

        if connection.user_id is not None and connection.user_id != user_id:
            self._registry.remove_if_matches(connection.user_id, connection_id)

        connection.user_id = user_id
        connection.state = ConnectionState.IDENTIFIED
        self._registry.set(user_id, connection_id)
        logger.info("User joined: user_id=%s connection_id=%s", user_id, connection_id)

        await self._send(connection, EVENT_JOINED, {"userId": user_id})

    def on_disconnect(self, connection_id: str) -> None:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        connection.state = ConnectionState.CLOSED

        removed = self._registry.remove_by_connection(connection_id)
        logger.info(
            "WebSocket disconnected: connection_id=%s user_id=%s presence_removed=%s",
            connection_id,
            connection.user_id,
            bool(removed),
        )

    def on_transport_error(self, connection_id: str, exc: BaseException) -> None:
        # Cleanup happens on the disconnect that follows.
        logger.warning("WebSocket error on connection_id=%s: %s", connection_id, exc)

    # ------------------------------------------------------------------
    # Incoming frames
    # ------------------------------------------------------------------

    async def handle_message(
        self, connection_id: str, raw: str | bytes | dict[str, Any]
    ) -> None:
        """
        Route one client frame. Protocol errors are answered with an
        `error` event on the same connection and go no further.
        """
        try:
            event, data = self._decode(raw)
            if event != EVENT_JOIN:
                raise InvalidMessage(f"Unknown event: {event!r}")
            await self.on_join(connection_id, data)
        except RealtimeError as exc:
            logger.info(
                "Rejected frame on connection_id=%s: %s", connection_id, exc.message
            )
            connection = self._live(connection_id)
            if connection is not None:
                await self._send(connection, EVENT_ERROR, exc.to_dict())

    @staticmethod
    def _decode(raw: str | bytes | dict[str, Any]) -> tuple[str, Any]:
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError:
                raise InvalidMessage("Frame is not valid JSON") from None
        if not isinstance(raw, dict) or not isinstance(raw.get("event"), str):
            raise InvalidMessage("Frame must be an object with an 'event' name")
        return raw["event"], raw.get("data")

    # ------------------------------------------------------------------
    # Outgoing frames
    # ------------------------------------------------------------------

    def push(self, connection_id: str, event: str, data: Any) -> bool:
        """
        Fire-and-forget send to a live connection.

        Returns False if the connection is unknown or closed. The send itself
        completes later on the event loop; failures are logged, not raised.
        """
        connection = self._live(connection_id)
        if connection is None:
            return False
        frame = _frame(event, data)
        task = asyncio.get_running_loop().create_task(
            self._send_frame(connection, frame)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def drain(self) -> None:
        """Wait for every in-flight push to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _send(self, connection: Connection, event: str, data: Any) -> bool:
        return await self._send_frame(connection, _frame(event, data))

    async def _send_frame(self, connection: Connection, frame: dict[str, Any]) -> bool:
        try:
            await connection.websocket.send_json(frame)
        except Exception as exc:
            self.on_transport_error(connection.connection_id, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _live(self, connection_id: str) -> Connection | None:
        connection = self._connections.get(connection_id)
        if connection is None or connection.state == ConnectionState.CLOSED:
            return None
        return connection

    def get(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    @property
    def active_connection_ids(self) -> list[str]:
        return list(self._connections.keys())
