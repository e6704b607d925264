"""
Request authorization and owner scoping.

A caller is authorized when it either presents the client API key header
(native/voice clients) or the dashboard session cookie set by /auth/login.
The owner id is resolved here, at the HTTP edge, and passed explicitly to
every service call.
"""
from __future__ import annotations

import hashlib
import hmac
from typing import Optional

from fastapi import Cookie, Header

from cadence.core.config import settings
from cadence.core.errors import ConfigurationError, UnauthorizedError

API_KEY_HEADER = "x-cadence-api-key"
SESSION_COOKIE = "cadence_auth"
SESSION_MAX_AGE = 60 * 60 * 24 * 30  # 30 days


def session_token() -> str:
    """Cookie value for an authenticated dashboard session."""
    return hmac.new(
        settings.SECRET_KEY.encode(), b"cadence-dashboard-session", hashlib.sha256
    ).hexdigest()


def check_password(password: str) -> bool:
    if not settings.DASHBOARD_PASSWORD:
        raise ConfigurationError("DASHBOARD_PASSWORD")
    return hmac.compare_digest(password.encode(), settings.DASHBOARD_PASSWORD.encode())


def require_authorized(
    api_key: Optional[str] = Header(default=None, alias=API_KEY_HEADER),
    session: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
) -> None:
    if api_key and settings.CLIENT_API_KEY and hmac.compare_digest(
        api_key.encode(), settings.CLIENT_API_KEY.encode()
    ):
        return
    if session and hmac.compare_digest(session.encode(), session_token().encode()):
        return
    raise UnauthorizedError()


def get_owner_id() -> str:
    if not settings.OWNER_ID:
        raise ConfigurationError("OWNER_ID")
    return settings.OWNER_ID
