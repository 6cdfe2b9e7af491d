"""Session cookie binding. The cookie only carries the token; the session itself lives in the key-value store."""

from fastapi import Response

from soundmap.config import Config
from soundmap.core.modules.session.models import AuthToken

SESSION_COOKIE_NAME = "session_id"


def set_session_cookie(response: Response, auth_token: AuthToken, config: Config) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=auth_token,
        max_age=config.session_ttl_seconds,
        path="/",
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, config: Config) -> None:
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
    )
