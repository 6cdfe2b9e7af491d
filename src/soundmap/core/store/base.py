from abc import ABC, abstractmethod
from collections.abc import Iterable
from uuid import UUID

from soundmap.core.modules.comment.models import Comment
from soundmap.core.modules.follow.models import Follow
from soundmap.core.modules.like.models import Like
from soundmap.core.modules.post.models import Post
from soundmap.core.modules.user.models import User


class DataStore(ABC):
    """Persistence for users, posts, follows, likes and comments.

    Lists that have an order are returned newest first (created_at descending).
    Implementations hold no business rules: toggles, feed deduplication and
    counts are computed by the services on top of this interface.
    """

    async def on_start(self) -> None:
        """Prepare the store on application startup."""

    async def close(self) -> None:
        """Release connections on application shutdown."""

    # === Users ===
    @abstractmethod
    async def get_user(self, user_id: UUID) -> User | None: ...

    @abstractmethod
    async def get_users(self, user_ids: Iterable[UUID]) -> dict[UUID, User]: ...

    @abstractmethod
    async def find_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    async def find_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """Insert user. Raises ConflictError if email or username is taken."""

    # === Follows ===
    @abstractmethod
    async def find_follow_edge(self, follower_id: UUID, following_id: UUID) -> Follow | None: ...

    @abstractmethod
    async def create_follow_edge(self, follow: Follow) -> Follow: ...

    @abstractmethod
    async def delete_follow_edge(self, follower_id: UUID, following_id: UUID) -> bool:
        """Delete the edge and return whether it existed."""

    @abstractmethod
    async def list_following_ids(self, follower_id: UUID) -> list[UUID]: ...

    @abstractmethod
    async def count_followers(self, user_id: UUID) -> int: ...

    @abstractmethod
    async def count_following(self, user_id: UUID) -> int: ...

    # === Posts ===
    @abstractmethod
    async def create_post(self, post: Post) -> Post: ...

    @abstractmethod
    async def get_post(self, post_id: UUID) -> Post | None: ...

    @abstractmethod
    async def find_posts_by_author_set(self, author_ids: Iterable[UUID], limit: int) -> list[Post]: ...

    @abstractmethod
    async def list_posts_by_author(self, author_id: UUID) -> list[Post]: ...

    @abstractmethod
    async def list_located_posts(self, limit: int) -> list[Post]:
        """Posts that carry both latitude and longitude."""

    @abstractmethod
    async def count_posts(self, author_id: UUID) -> int: ...

    # === Likes ===
    @abstractmethod
    async def find_like_edge(self, user_id: UUID, post_id: UUID) -> Like | None: ...

    @abstractmethod
    async def create_like_edge(self, like: Like) -> Like: ...

    @abstractmethod
    async def delete_like_edge(self, user_id: UUID, post_id: UUID) -> bool:
        """Delete the edge and return whether it existed."""

    @abstractmethod
    async def count_likes(self, post_id: UUID) -> int: ...

    # === Comments ===
    @abstractmethod
    async def create_comment(self, comment: Comment) -> Comment: ...

    @abstractmethod
    async def list_comments(self, post_id: UUID) -> list[Comment]: ...

    @abstractmethod
    async def count_comments(self, post_id: UUID) -> int: ...
