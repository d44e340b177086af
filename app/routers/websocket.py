"""
WebSocket endpoint.
Real-time notification delivery to users who have joined.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from jose import JWTError

from app.core.security import decode_token
from app.core.websocket import ConnectionGateway

logger = logging.getLogger(__name__)

router = APIRouter()

# Close code sent when the connect-time token is rejected
WS_CLOSE_INVALID_TOKEN = 4001


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    token: str | None = Query(default=None, description="JWT access token"),
) -> None:
    """
    Connect: WS /api/ws?token={access_token}

    Protocol (JSON frames {"event", "data"}, as text or UTF-8 binary):
    - client sends {"event": "join", "data": "<userId>"}
    - server answers {"event": "joined", "data": {"userId": ...}}
      or {"event": "error", "data": {"code": ..., "message": ...}}
    - server pushes {"event": "new_notification", "data": <notification>}

    With a token, the socket may only join as the token's subject. An
    invalid token is refused before the socket is accepted. A client that
    never joins stays connected but receives no pushes.
    """
    authenticated_user_id: str | None = None
    if token is not None:
        try:
            authenticated_user_id = decode_token(token).get("sub")
        except JWTError:
            authenticated_user_id = None
        if not isinstance(authenticated_user_id, str) or not authenticated_user_id:
            logger.info("WebSocket refused: invalid token")
            await websocket.close(code=WS_CLOSE_INVALID_TOKEN)
            return

    gateway: ConnectionGateway = websocket.app.state.gateway
    connection_id = await gateway.on_connect(
        websocket, authenticated_user_id=authenticated_user_id
    )

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(code=message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await gateway.handle_message(connection_id, raw)
    except WebSocketDisconnect:
        pass
    except Exception as exc:
        gateway.on_transport_error(connection_id, exc)
    finally:
        gateway.on_disconnect(connection_id)
