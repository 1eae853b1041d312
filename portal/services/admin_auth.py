from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Response
from itsdangerous import BadSignature, URLSafeTimedSerializer

from portal.core import config

ADMIN_SESSION_COOKIE = "admin_session"
ADMIN_SESSION_SALT = "layanan-admin-session"


@dataclass(frozen=True)
class AdminSession:
    admin_id: str
    role: str
    expires_at: int

    @property
    def expired(self) -> bool:
        return self.expires_at < int(time.time())


def _serializer() -> URLSafeTimedSerializer:
    if not config.ADMIN_SESSION_SECRET:
        raise RuntimeError("ADMIN_SESSION_SECRET is not configured")
    return URLSafeTimedSerializer(config.ADMIN_SESSION_SECRET, salt=ADMIN_SESSION_SALT)


def create_admin_session(admin_id: str, role: str, *, expires_at: int | None = None) -> str:
    if expires_at is None:
        expires_at = int(time.time()) + config.ADMIN_SESSION_MAX_AGE_SECONDS
    return _serializer().dumps({"admin_id": str(admin_id), "role": role, "exp": expires_at})


def decode_admin_session(token: str) -> Optional[AdminSession]:
    """Return the session for a valid, unexpired token, otherwise ``None``."""
    try:
        # SignatureExpired is a BadSignature subclass.
        payload = _serializer().loads(token, max_age=config.ADMIN_SESSION_MAX_AGE_SECONDS)
    except BadSignature:
        return None
    if not isinstance(payload, dict) or not payload.get("admin_id"):
        return None
    try:
        session = AdminSession(
            admin_id=str(payload["admin_id"]),
            role=str(payload.get("role") or ""),
            expires_at=int(payload["exp"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
    return None if session.expired else session


def build_admin_session_cookie_options() -> dict[str, Any]:
    secure = config.ADMIN_SESSION_COOKIE_SECURE
    samesite = config.ADMIN_SESSION_COOKIE_SAMESITE
    # Browsers reject SameSite=None without Secure.
    if samesite == "none" and not secure:
        samesite = "lax"
    return {
        "domain": config.ADMIN_SESSION_COOKIE_DOMAIN,
        "httponly": True,
        "samesite": samesite,
        "path": "/",
        "secure": secure,
    }


def set_admin_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=ADMIN_SESSION_COOKIE,
        value=token,
        max_age=config.ADMIN_SESSION_MAX_AGE_SECONDS,
        **build_admin_session_cookie_options(),
    )


def clear_admin_session_cookie(response: Response) -> None:
    response.delete_cookie(key=ADMIN_SESSION_COOKIE, **build_admin_session_cookie_options())
