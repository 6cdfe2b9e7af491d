from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from soundmap.config import Config
from soundmap.core.core import Core
from soundmap.core.modules.auth.models import AuthResult
from soundmap.core.modules.comment.models import Comment
from soundmap.core.modules.follow.models import FollowState
from soundmap.core.modules.like.models import LikeState
from soundmap.core.modules.post.models import MapPost, Post, PostDetail, PostView
from soundmap.core.modules.profile.models import Profile
from soundmap.core.modules.session.models import AuthToken
from soundmap.core.modules.user.models import User, UserView
from soundmap.core.objects import StoredObject
from soundmap.errors import AuthenticationError


class App:
    """Facade for all application operations, checks authentication before delegating to Core."""

    def __init__(self, config: Config, core: Core | None = None) -> None:
        self._core = core if core is not None else Core.from_config(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    @property
    def config(self) -> Config:
        return self._core.config

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_auth_token_valid(auth_token)

    # === Auth ===
    async def register(self, email: str, username: str, password: str) -> AuthResult:
        """Create an account and open a session for it."""
        return await self._core.services.auth.register(email, username, password)

    async def login(self, email: str, password: str) -> AuthResult:
        """Authenticate user and create session."""
        return await self._core.services.auth.login(email, password)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Invalidate the session, if any. Succeeds for anonymous callers too."""
        await self._core.services.auth.logout(auth_token)

    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        """Get current authenticated user profile."""
        current_user = await self._ensure_authenticated(auth_token)
        return UserView.from_domain(current_user)

    # === Posts ===
    async def publish_post(
        self,
        auth_token: AuthToken,
        filename: str,
        content: bytes,
        content_type: str,
        title: str,
        description: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        location: str | None = None,
    ) -> Post:
        """Upload a clip and create its post in one step."""
        current_user = await self._ensure_authenticated(auth_token)
        post_service = self._core.services.post
        # Reject a bad form before it costs an upload from the quota
        post_service.validate_post_fields(title, description, latitude, longitude, location)
        audio = await self._core.services.upload.upload_audio(current_user.id, filename, content, content_type)
        return await post_service.create_post(
            current_user.id, title, audio.url, description, latitude, longitude, location
        )

    async def get_post(self, auth_token: AuthToken | None, post_id: UUID) -> PostDetail:
        """Get post detail. Anonymous viewers are allowed."""
        viewer = await self._resolve_viewer(auth_token)
        return await self._core.services.post.get_post_detail(post_id, viewer.id if viewer else None)

    async def get_map_posts(self, auth_token: AuthToken) -> list[MapPost]:
        """Get geotagged posts for the map (requires authentication)."""
        await self._ensure_authenticated(auth_token)
        return await self._core.services.post.list_map_posts()

    async def get_timeline(self, auth_token: AuthToken, limit: int | None = None) -> list[PostView]:
        """Get the current user's timeline."""
        current_user = await self._ensure_authenticated(auth_token)
        if limit is None:
            limit = self._core.config.feed_limit
        return await self._core.services.feed.compose_feed(current_user.id, limit)

    async def get_audio(self, name: str) -> StoredObject:
        """Get a stored clip by public file name."""
        return await self._core.services.upload.get_audio(name)

    # === Social actions ===
    async def toggle_like(self, auth_token: AuthToken, post_id: UUID) -> LikeState:
        """Like or unlike a post."""
        current_user = await self._ensure_authenticated(auth_token)
        return await self._core.services.like.toggle_like(current_user.id, post_id)

    async def create_comment(self, auth_token: AuthToken, post_id: UUID, content: str) -> Comment:
        """Add comment to post."""
        current_user = await self._ensure_authenticated(auth_token)
        return await self._core.services.comment.create_comment(post_id, current_user.id, content)

    async def toggle_follow(self, auth_token: AuthToken, username: str) -> FollowState:
        """Follow or unfollow a user."""
        current_user = await self._ensure_authenticated(auth_token)
        return await self._core.services.follow.toggle_follow(current_user.id, username)

    async def get_profile(self, auth_token: AuthToken | None, username: str) -> Profile:
        """Get a public profile. Anonymous viewers are allowed."""
        viewer = await self._resolve_viewer(auth_token)
        return await self._core.services.profile.get_profile(username, viewer.id if viewer else None)

    # === Private resolver methods ===
    async def _ensure_authenticated(self, auth_token: AuthToken | None) -> User:
        """Resolve token to user. Raises AuthenticationError if there is no valid session."""
        return await self._core.services.session.get_authenticated_user(auth_token)

    async def _resolve_viewer(self, auth_token: AuthToken | None) -> User | None:
        """Resolve an optional token; a missing or invalid one means an anonymous viewer."""
        try:
            return await self._ensure_authenticated(auth_token)
        except AuthenticationError:
            return None
