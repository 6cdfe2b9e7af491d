from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from soundmap.core.models import Entity


class User(Entity):
    """User domain model with credentials."""

    email: str  # stored lower-cased
    username: str
    password_hash: str  # bcrypt hash
    bio: str | None = None
    avatar_url: str | None = None


class AuthorSummary(BaseModel):
    """Author fields denormalized into posts and comments."""

    id: UUID = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    avatar_url: str | None = Field(None, description="Avatar URL")

    @classmethod
    def from_domain(cls, user: User) -> "AuthorSummary":
        return cls(id=user.id, username=user.username, avatar_url=user.avatar_url)


class UserView(BaseModel):
    """Account information of the logged-in user (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    username: str = Field(..., description="Username")
    bio: str | None = Field(None, description="Profile text")
    avatar_url: str | None = Field(None, description="Avatar URL")
    created_at: datetime = Field(..., description="Registration time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
        )
