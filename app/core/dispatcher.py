"""
Real-time notification dispatch.

Pushes a notification to a user's live WebSocket if they are connected.
Best-effort only: no queue, no retry. Offline users read their stored
notifications through GET /api/notifications instead.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from app.core.exceptions import InvalidDeliveryRequest
from app.core.presence import PresenceRegistry
from app.core.websocket import EVENT_NEW_NOTIFICATION, ConnectionGateway

logger = logging.getLogger(__name__)


class DeliveryStatus(str, enum.Enum):
    DELIVERED = "DELIVERED"
    SKIPPED = "SKIPPED"


class SkipReason(str, enum.Enum):
    NOT_CONNECTED = "NOT_CONNECTED"


class DeliveryOutcome(BaseModel):
    """Result of a single deliver() call."""

    status: DeliveryStatus
    reason: SkipReason | None = None
    connection_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def delivered(cls, connection_id: str) -> DeliveryOutcome:
        return cls(status=DeliveryStatus.DELIVERED, connection_id=connection_id)

    @classmethod
    def not_connected(cls) -> DeliveryOutcome:
        return cls(status=DeliveryStatus.SKIPPED, reason=SkipReason.NOT_CONNECTED)

    @property
    def is_delivered(self) -> bool:
        return self.status == DeliveryStatus.DELIVERED


class NotificationDispatcher:
    def __init__(self, registry: PresenceRegistry, gateway: ConnectionGateway) -> None:
        self._registry = registry
        self._gateway = gateway

    def deliver(self, user_id: str, payload: Any) -> DeliveryOutcome:
        """
        Send payload to user_id as a `new_notification` event.

        Returns DELIVERED once the push is scheduled on the user's connection,
        or SKIPPED/NOT_CONNECTED if the user has no live, joined connection.

        Raises:
            InvalidDeliveryRequest: If user_id is empty or payload is None.
        """
        if not isinstance(user_id, str) or not user_id.strip():
            logger.error("deliver() called without a user id: %r", user_id)
            raise InvalidDeliveryRequest("deliver requires a non-empty user_id")
        if payload is None:
            logger.error("deliver() called without a payload for user_id=%s", user_id)
            raise InvalidDeliveryRequest("deliver requires a payload")

        connection_id = self._registry.get(user_id)
        if connection_id is None:
            logger.debug("Notification not pushed, user_id=%s not connected", user_id)
            return DeliveryOutcome.not_connected()

        if not self._gateway.push(connection_id, EVENT_NEW_NOTIFICATION, payload):
            logger.debug(
                "Notification not pushed, connection_id=%s for user_id=%s is gone",
                connection_id,
                user_id,
            )
            return DeliveryOutcome.not_connected()

        logger.info("Sent notification to user_id=%s", user_id)
        return DeliveryOutcome.delivered(connection_id)
