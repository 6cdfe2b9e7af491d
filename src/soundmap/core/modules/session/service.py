import secrets

import structlog
from pydantic import ValidationError as PydanticValidationError

from soundmap.core.core import Service
from soundmap.core.kv import KeyValueUnavailableError
from soundmap.core.modules.session.models import AuthToken, SessionData
from soundmap.core.modules.user.models import User
from soundmap.errors import AuthenticationError, InternalError

logger = structlog.get_logger(__name__)

TOKEN_BYTES = 32


class SessionService(Service):
    """Opaque session tokens stored in the key-value store with a fixed TTL."""

    @property
    def ttl_seconds(self) -> int:
        return self.core.config.session_ttl_seconds

    async def create_session(self, payload: SessionData) -> AuthToken:
        """Issue a new token for the payload.

        Raises:
            InternalError: If the key-value store is unreachable
        """
        auth_token = AuthToken(secrets.token_hex(TOKEN_BYTES))
        try:
            await self.core.kv.put(auth_token, payload.model_dump_json().encode("utf-8"), self.ttl_seconds)
        except KeyValueUnavailableError as e:
            logger.error("session_store_unavailable", operation="create", user_id=payload.user_id, error=str(e))
            raise InternalError("Authentication is temporarily unavailable") from e
        return auth_token

    async def get_session(self, auth_token: AuthToken) -> SessionData | None:
        """Resolve a token to its payload.

        Missing, expired and unreadable entries all mean "no session", as does an unreachable store.
        """
        try:
            data = await self.core.kv.get(auth_token)
        except KeyValueUnavailableError as e:
            logger.warning("session_store_unavailable", operation="get", error=str(e))
            return None
        if data is None:
            return None
        try:
            return SessionData.model_validate_json(data)
        except PydanticValidationError:
            logger.warning("session_payload_corrupt")
            return None

    async def delete_session(self, auth_token: AuthToken) -> None:
        """Remove a session. Deleting a missing token is a no-op."""
        await self.core.kv.delete(auth_token)

    async def get_authenticated_user(self, auth_token: AuthToken | None) -> User:
        """Resolve a token to its user.

        A session whose user no longer exists is deleted before failing.

        Raises:
            AuthenticationError: If there is no valid session
        """
        if not auth_token:
            raise AuthenticationError
        session = await self.get_session(auth_token)
        if session is None:
            raise AuthenticationError("Invalid or expired session")

        user = await self.store.get_user(session.user_id)
        if user is None:
            logger.warning("session_user_missing", user_id=session.user_id)
            try:
                await self.delete_session(auth_token)
            except KeyValueUnavailableError as e:
                logger.warning("session_store_unavailable", operation="delete", error=str(e))
            raise AuthenticationError("Invalid or expired session")
        return user

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return await self.get_session(auth_token) is not None
