from typing import Annotated, cast
from urllib.parse import urlsplit

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from soundmap.app import App
from soundmap.config import Config
from soundmap.core.modules.session.models import AuthToken
from soundmap.errors import AuthenticationError, ValidationError
from soundmap.web.cookies import SESSION_COOKIE_NAME

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_optional_auth_token(
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken | None:
    """Get a valid auth token from Authorization Bearer header or cookie, or None for anonymous requests."""
    # Check Bearer token first (preferred)
    if credentials and credentials.scheme == "Bearer" and credentials.credentials:
        auth_token = AuthToken(credentials.credentials)
        if await app.is_auth_token_valid(auth_token):
            return auth_token

    # Fallback to cookie
    if token_cookie:
        auth_token = AuthToken(token_cookie)
        if await app.is_auth_token_valid(auth_token):
            return auth_token

    return None


async def get_auth_token(auth_token: Annotated[AuthToken | None, Depends(get_optional_auth_token)]) -> AuthToken:
    """Get and validate auth token from Authorization Bearer header or cookie."""
    if auth_token is None:
        raise AuthenticationError
    return auth_token


def redirect_back(request: Request, default: str) -> RedirectResponse:
    """Redirect to the referring page on this site, or to default.

    Only the path and query of the Referer are used, so the redirect never leaves the site.
    """
    target = default
    referer = request.headers.get("referer")
    if referer:
        parts = urlsplit(referer)
        if parts.path.startswith("/") and not parts.path.startswith("//"):
            target = parts.path + (f"?{parts.query}" if parts.query else "")
    return RedirectResponse(url=target, status_code=303)


def parse_optional_float(value: str | None, field: str) -> float | None:
    """Parse an optional numeric form field; browsers submit empty inputs as ""."""
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ValidationError(f"{field} must be a number") from e


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
OptionalAuthTokenDep = Annotated[AuthToken | None, Depends(get_optional_auth_token)]
