from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Form, Request, UploadFile
from fastapi.responses import RedirectResponse, Response

from soundmap.core.modules.post.models import MapPost, PostDetail, PostView
from soundmap.web.deps import AppDep, AuthTokenDep, OptionalAuthTokenDep, parse_optional_float, redirect_back
from soundmap.web.openapi import ErrorResponse

router = APIRouter(tags=["posts"])


@router.post(
    "/post/new",
    summary="Publish post",
    description=(
        "Upload an audio clip (webm, mpeg, wav, ogg, mp4, m4a; max 50 MB) and create a post for it. "
        "Uploads are limited per user per hour."
    ),
    operation_id="createPost",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Post created, redirect to the post"},
        400: {"model": ErrorResponse, "description": "Missing file, unsupported format, too large, or invalid fields"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        429: {"model": ErrorResponse, "description": "Upload limit reached"},
        500: {"model": ErrorResponse, "description": "Upload failed"},
    },
)
async def create_post(
    title: Annotated[str, Form()],
    app: AppDep,
    auth_token: AuthTokenDep,
    audio: UploadFile | None = None,
    description: Annotated[str | None, Form()] = None,
    latitude: Annotated[str | None, Form()] = None,
    longitude: Annotated[str | None, Form()] = None,
    location: Annotated[str | None, Form()] = None,
) -> RedirectResponse:
    # A missing file reaches the upload checks as empty content, after the quota check
    filename, content_type, content = "recording.webm", "", b""
    if audio is not None:
        filename = audio.filename or filename
        content_type = audio.content_type or ""
        content = await audio.read()
    post = await app.publish_post(
        auth_token,
        filename=filename,
        content=content,
        content_type=content_type,
        title=title,
        description=description,
        latitude=parse_optional_float(latitude, "Latitude"),
        longitude=parse_optional_float(longitude, "Longitude"),
        location=location,
    )
    return RedirectResponse(url=f"/post/{post.id}", status_code=303)


@router.get(
    "/post/{post_id}",
    summary="Get post",
    description="Get a post with its comments (newest first) and whether the current user likes it.",
    operation_id="getPost",
    responses={
        200: {"description": "Post detail"},
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
)
async def get_post(post_id: UUID, app: AppDep, auth_token: OptionalAuthTokenDep) -> PostDetail:
    return await app.get_post(auth_token, post_id)


@router.post(
    "/post/{post_id}/like",
    summary="Toggle like",
    description="Like the post, or remove the like if already liked. Redirects back to the referring page.",
    operation_id="toggleLike",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Like toggled"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
)
async def toggle_like(post_id: UUID, request: Request, app: AppDep, auth_token: AuthTokenDep) -> RedirectResponse:
    await app.toggle_like(auth_token, post_id)
    return redirect_back(request, f"/post/{post_id}")


@router.post(
    "/post/{post_id}/comment",
    summary="Create comment",
    description="Add a comment to the post. Redirects back to the referring page.",
    operation_id="createComment",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Comment created"},
        400: {"model": ErrorResponse, "description": "Empty comment"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
)
async def create_comment(
    post_id: UUID,
    request: Request,
    app: AppDep,
    auth_token: AuthTokenDep,
    content: Annotated[str, Form()] = "",
) -> RedirectResponse:
    await app.create_comment(auth_token, post_id, content)
    return redirect_back(request, f"/post/{post_id}")


@router.get(
    "/timeline",
    summary="Get timeline",
    description="Posts by the current user and everyone they follow, newest first.",
    operation_id="getTimeline",
    responses={
        200: {"description": "Timeline posts"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_timeline(app: AppDep, auth_token: AuthTokenDep) -> list[PostView]:
    return await app.get_timeline(auth_token)


@router.get(
    "/map",
    summary="Get map posts",
    description="All posts that carry coordinates, newest first.",
    operation_id="getMapPosts",
    responses={
        200: {"description": "Map pins"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_map_posts(app: AppDep, auth_token: AuthTokenDep) -> list[MapPost]:
    return await app.get_map_posts(auth_token)


@router.get(
    "/audio/{name}",
    summary="Download audio",
    description="Stream a stored audio clip.",
    operation_id="getAudio",
    response_class=Response,
    responses={
        200: {"description": "Audio file"},
        404: {"model": ErrorResponse, "description": "Audio not found"},
    },
)
async def get_audio(name: str, app: AppDep) -> Response:
    stored = await app.get_audio(name)
    return Response(content=stored.content, media_type=stored.content_type, headers={"Cache-Control": "public, max-age=31536000, immutable"})
