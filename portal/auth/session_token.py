"""Signed cookie value naming a server-side session."""

from datetime import datetime, timezone

import jwt

from portal.auth.sessions import SessionRecord
from portal.core import config

SESSION_TOKEN_TYPE = "portal-session"


def create_session_token(record: SessionRecord) -> str:
    # The token dies with the server-side record it names.
    payload = {
        "sub": record.key,
        "typ": SESSION_TOKEN_TYPE,
        "iat": datetime.now(timezone.utc),
        "exp": record.expires_at,
    }
    return jwt.encode(payload, config.SESSION_SECRET, algorithm=config.SESSION_ALGORITHM)


def decode_session_token(token: str) -> str | None:
    try:
        payload = jwt.decode(
            token,
            config.SESSION_SECRET,
            algorithms=[config.SESSION_ALGORITHM],
            options={"require": ["sub", "exp", "typ"]},
        )
    except jwt.PyJWTError:
        return None
    if payload["typ"] != SESSION_TOKEN_TYPE:
        return None
    return payload["sub"]
