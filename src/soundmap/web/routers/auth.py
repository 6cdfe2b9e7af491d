from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Form
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field

from soundmap.core.modules.user.models import UserView
from soundmap.web.cookies import clear_session_cookie, set_session_cookie
from soundmap.web.deps import AppDep, AuthTokenDep, ConfigDep, OptionalAuthTokenDep
from soundmap.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class RegisterResponse(BaseModel):
    """Registration response. The session cookie is set on the same response."""

    user_id: UUID = Field(..., serialization_alias="userId", description="ID of the new user")


@router.post(
    "/register",
    summary="Create account",
    description="Register with email, username and password. Logs the new user in.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created, session cookie set"},
        400: {"model": ErrorResponse, "description": "Invalid input, or email/username already registered"},
        500: {"model": ErrorResponse, "description": "Authentication unavailable"},
    },
)
async def register(
    email: Annotated[str, Form()],
    username: Annotated[str, Form()],
    password: Annotated[str, Form()],
    app: AppDep,
    config: ConfigDep,
) -> JSONResponse:
    result = await app.register(email, username, password)
    response = JSONResponse(status_code=201, content=RegisterResponse(user_id=result.user.id).model_dump(mode="json", by_alias=True))
    set_session_cookie(response, result.token, config)
    return response


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password. Sets the session cookie and redirects to the timeline.",
    operation_id="login",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Logged in, redirect to /timeline"},
        400: {"model": ErrorResponse, "description": "Email or password is incorrect"},
        500: {"model": ErrorResponse, "description": "Authentication unavailable"},
    },
)
async def login(
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
    app: AppDep,
    config: ConfigDep,
) -> RedirectResponse:
    result = await app.login(email, password)
    response = RedirectResponse(url="/timeline", status_code=303)
    set_session_cookie(response, result.token, config)
    return response


@router.post(
    "/logout",
    summary="End session",
    description="Invalidate the current session (if any), clear the cookie and redirect to the login page.",
    operation_id="logout",
    status_code=303,
    response_class=RedirectResponse,
    responses={303: {"description": "Logged out, redirect to /login"}},
)
async def logout(app: AppDep, config: ConfigDep, auth_token: OptionalAuthTokenDep) -> RedirectResponse:
    await app.logout(auth_token)
    response = RedirectResponse(url="/login", status_code=303)
    clear_session_cookie(response, config)
    return response


@router.get(
    "/me",
    summary="Get current user",
    description="Get the account of the currently authenticated user.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.get_current_user(auth_token)
