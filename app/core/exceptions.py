"""
Errors raised by the real-time notification layer.

Each carries the same {"code", "message"} shape the HTTP layer uses in
HTTPException details, so it can be sent back over a socket as-is.
"""

from __future__ import annotations


class RealtimeError(Exception):
    code = "REALTIME_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class InvalidJoinRequest(RealtimeError):
    """A join arrived without a usable user id."""

    code = "INVALID_JOIN"


class InvalidMessage(RealtimeError):
    """A frame could not be decoded or named an unknown event."""

    code = "INVALID_MESSAGE"


class InvalidDeliveryRequest(RealtimeError):
    """
    deliver() was called with a missing user id or payload.

    This is a bug in the calling service, never an expected runtime outcome
    (an offline user is reported as a skipped delivery instead).
    """

    code = "INVALID_DELIVERY"
