from pydantic import BaseModel

from soundmap.core.modules.session.models import AuthToken
from soundmap.core.modules.user.models import User


class AuthResult(BaseModel):
    """Logged-in user and the session token issued for them."""

    user: User
    token: AuthToken
