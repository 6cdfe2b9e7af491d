import asyncio
from uuid import UUID

from soundmap.core.core import Service
from soundmap.core.modules.profile.models import Profile, ProfileStats


class ProfileService(Service):
    """Builds public profile pages."""

    async def get_profile(self, username: str, viewer_id: UUID | None) -> Profile:
        """Get a user's profile with their posts and follow counts.

        Raises:
            NotFoundError: If no user has this username
        """
        user = await self.core.services.user.get_user_by_username(username)

        posts, post_count, followers, following = await asyncio.gather(
            self.store.list_posts_by_author(user.id),
            self.store.count_posts(user.id),
            self.store.count_followers(user.id),
            self.store.count_following(user.id),
        )
        post_views = await self.core.services.post.to_views(posts)

        is_own_profile = viewer_id == user.id
        is_following = False
        if viewer_id is not None and not is_own_profile:
            is_following = await self.core.services.follow.is_following(viewer_id, user.id)

        return Profile(
            id=user.id,
            username=user.username,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            stats=ProfileStats(posts=post_count, followers=followers, following=following),
            posts=post_views,
            is_following=is_following,
            is_own_profile=is_own_profile,
        )
