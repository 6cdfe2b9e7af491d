from soundmap.web.routers.auth import router as auth_router
from soundmap.web.routers.posts import router as posts_router
from soundmap.web.routers.profile import router as profile_router

__all__ = [
    "auth_router",
    "posts_router",
    "profile_router",
]
