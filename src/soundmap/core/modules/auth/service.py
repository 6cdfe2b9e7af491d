import asyncio
from functools import cache

import structlog

from soundmap.core.core import Service
from soundmap.core.kv import KeyValueUnavailableError
from soundmap.core.modules.auth.models import AuthResult
from soundmap.core.modules.session.models import AuthToken, SessionData
from soundmap.core.modules.user.models import User
from soundmap.core.modules.user.password import hash_password, verify_password
from soundmap.core.modules.user.validators import normalize_email, validate_password, validate_username
from soundmap.errors import InvalidCredentialsError

logger = structlog.get_logger(__name__)


@cache
def _unknown_user_hash() -> str:
    return hash_password("soundmap-unknown-user")


def _reject_unknown_user(password: str) -> None:
    # Same bcrypt cost as a wrong password, so response time does not reveal registered emails
    verify_password(password, _unknown_user_hash())


class AuthService(Service):
    """Registration, login and logout on top of users and sessions."""

    async def register(self, email: str, username: str, password: str) -> AuthResult:
        """Create an account and log it in.

        Raises:
            ValidationError: If email, username or password is malformed
            ConflictError: If the email or username is already registered
            InternalError: If the session store is unavailable
        """
        email = normalize_email(email)
        username = username.strip()
        validate_username(username)
        validate_password(password)

        user = await self.core.services.user.create_user(email, username, password)
        token = await self._start_session(user)
        logger.info("user_registered", user_id=user.id)
        return AuthResult(user=user, token=token)

    async def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and open a session.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
            InternalError: If the session store is unavailable
        """
        users = self.core.services.user
        user = await users.find_user_by_email(email.strip().lower())
        if user is None:
            await asyncio.to_thread(_reject_unknown_user, password)
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentialsError
        if not await users.check_password(user, password):
            logger.info("login_failed", reason="wrong_password", user_id=user.id)
            raise InvalidCredentialsError

        token = await self._start_session(user)
        logger.info("user_logged_in", user_id=user.id)
        return AuthResult(user=user, token=token)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """End the session if there is one. Always succeeds."""
        if not auth_token:
            return
        try:
            await self.core.services.session.delete_session(auth_token)
        except KeyValueUnavailableError as e:
            logger.warning("logout_session_delete_failed", error=str(e))

    async def _start_session(self, user: User) -> AuthToken:
        return await self.core.services.session.create_session(SessionData.for_user(user))
