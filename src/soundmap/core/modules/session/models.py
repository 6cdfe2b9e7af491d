"""Session management models."""

from typing import NewType
from uuid import UUID

from pydantic import BaseModel

from soundmap.core.modules.user.models import User

AuthToken = NewType("AuthToken", str)


class SessionData(BaseModel):
    """Payload stored under a session token."""

    user_id: UUID
    username: str
    email: str

    @classmethod
    def for_user(cls, user: User) -> "SessionData":
        return cls(user_id=user.id, username=user.username, email=user.email)
