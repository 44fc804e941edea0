"""
JWT helpers — stateless access and refresh tokens.

Access and refresh tokens are signed with two different secrets, so a token
of one kind never verifies as the other. A ``type`` claim is also embedded
and checked on decode.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


def encode_token(
    subject: str,
    *,
    secret: str,
    ttl_seconds: int,
    token_type: str,
    algorithm: str = "HS256",
) -> str:
    if not secret:
        raise RuntimeError(f"JWT secret for {token_type} tokens is not configured")
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(subject),
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(
    token: str,
    *,
    secret: str,
    token_type: str,
    algorithm: str = "HS256",
) -> dict[str, Any]:
    """Verify and decode *token*.

    Raises:
        jwt.InvalidTokenError: bad signature, expired, malformed, missing
            ``sub`` or wrong token type.
    """
    if not secret:
        raise jwt.InvalidTokenError(f"JWT secret for {token_type} tokens is not configured")
    claims = jwt.decode(
        token, secret, algorithms=[algorithm], options={"require": ["sub", "exp"]}
    )
    if claims.get("type") != token_type:
        raise jwt.InvalidTokenError(f"Not an {token_type} token")
    return claims
