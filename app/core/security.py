"""
Security utilities.

Decoding of identity provider JWTs. Tokens are issued elsewhere; this module
only reads them.
"""

from __future__ import annotations

from typing import Any

from jose import jwt

from app.core.config import settings


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT.

    Checks signature and expiry, plus audience and issuer when configured.

    Raises:
        JWTError: If the token is invalid, expired, or tampered.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"verify_aud": settings.JWT_AUDIENCE is not None},
    )

