import asyncio
from uuid import UUID

import structlog

from soundmap.core.core import Service
from soundmap.core.modules.user.models import AuthorSummary, User
from soundmap.core.modules.user.password import hash_password, verify_password
from soundmap.errors import ConflictError, NotFoundError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Looks up and creates user accounts."""

    async def get_user_by_username(self, username: str) -> User:
        """Get user by username."""
        user = await self.store.find_user_by_username(username)
        if user is None:
            raise NotFoundError(f"User '{username}' not found")
        return user

    async def find_user_by_email(self, email: str) -> User | None:
        return await self.store.find_user_by_email(email)

    async def get_author_summaries(self, user_ids: set[UUID]) -> dict[UUID, AuthorSummary]:
        """Get author summaries keyed by user ID. Unknown IDs are left out."""
        users = await self.store.get_users(user_ids)
        return {user_id: AuthorSummary.from_domain(user) for user_id, user in users.items()}

    async def create_user(self, email: str, username: str, password: str) -> User:
        """Create user with hashed password. Inputs must already be validated."""
        if await self.store.find_user_by_email(email) is not None:
            raise ConflictError("This email address is already registered")
        if await self.store.find_user_by_username(username) is not None:
            raise ConflictError(f"Username '{username}' is already taken")

        password_hash = await asyncio.to_thread(hash_password, password)
        user = await self.store.create_user(
            User(email=email, username=username, password_hash=password_hash, created_at=self.core.clock())
        )
        logger.info("user_created", user_id=user.id, username=username)
        return user

    async def check_password(self, user: User, password: str) -> bool:
        return await asyncio.to_thread(verify_password, password, user.password_hash)
