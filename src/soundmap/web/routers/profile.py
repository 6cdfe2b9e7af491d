from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from soundmap.core.modules.profile.models import Profile
from soundmap.web.deps import AppDep, AuthTokenDep, OptionalAuthTokenDep, redirect_back
from soundmap.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


@router.get(
    "/profile/{username}",
    summary="Get profile",
    description="Get a user's public profile, posts and follow counts.",
    operation_id="getProfile",
    responses={
        200: {"description": "User profile"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def get_profile(username: str, app: AppDep, auth_token: OptionalAuthTokenDep) -> Profile:
    return await app.get_profile(auth_token, username)


@router.post(
    "/profile/{username}/follow",
    summary="Toggle follow",
    description="Follow the user, or unfollow if already following. Redirects back to the referring page.",
    operation_id="toggleFollow",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Follow toggled"},
        400: {"model": ErrorResponse, "description": "Cannot follow yourself"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def toggle_follow(username: str, request: Request, app: AppDep, auth_token: AuthTokenDep) -> RedirectResponse:
    state = await app.toggle_follow(auth_token, username)
    return redirect_back(request, f"/profile/{state.username}")
