from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from json_post_type.auth import get_current_user, get_optional_user
from json_post_type.constants import PostStatus
from json_post_type.database import get_db
from json_post_type.exceptions import AuthenticationError, AuthorizationError, PostTypeNotFoundError
from json_post_type.models.user import User
from json_post_type.post_types import PostTypeObject, post_type_registry
from json_post_type.rest.controller import prepare_response, to_json_response
from json_post_type.schemas.post import PostRevisionResponse, PostWrite
from json_post_type.services import post_service, revision_service
from json_post_type.services.capability_service import can_create, can_edit_post, can_read_post, can_set_status

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PER_PAGE = 100


def get_rest_post_type(rest_base: str) -> PostTypeObject:
    post_type = post_type_registry.get_by_rest_base(rest_base)
    if post_type is None:
        raise PostTypeNotFoundError(rest_base)
    return post_type


def _forbidden(user: Optional[User], capability: str | None = None) -> Exception:
    if user is None:
        return AuthenticationError("Sorry, you are not allowed to do that.")
    return AuthorizationError(required_capability=capability)


# ── Types ─────────────────────────────────────────────────────────────────────


@router.get("/types")
async def list_types():
    return {
        post_type.name: post_type.to_rest()
        for post_type in post_type_registry.all()
        if post_type.args.show_in_rest
    }


@router.get("/types/{name}")
async def get_type(name: str):
    post_type = post_type_registry.get(name)
    if post_type is None or not post_type.args.show_in_rest:
        raise PostTypeNotFoundError(name)
    return post_type.to_rest()


# ── Posts ─────────────────────────────────────────────────────────────────────


@router.get("/{rest_base}")
async def list_items(
    request: Request,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=MAX_PER_PAGE),
    post_status: Optional[list[PostStatus]] = Query(None, alias="status"),
    post_type: PostTypeObject = Depends(get_rest_post_type),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    statuses = [s for s in (post_status or [PostStatus.PUBLISH]) if s != PostStatus.AUTO_DRAFT]
    posts, total, total_pages = await post_service.list_posts(db, post_type, user, statuses, page, per_page)

    items = []
    for post in posts:
        prepared = await prepare_response(post, post_type, request)
        items.append(prepared.to_payload())

    return JSONResponse(
        content=items,
        headers={"X-WP-Total": str(total), "X-WP-TotalPages": str(total_pages)},
    )


@router.post("/{rest_base}", status_code=status.HTTP_201_CREATED)
async def create_item(
    body: PostWrite,
    request: Request,
    post_type: PostTypeObject = Depends(get_rest_post_type),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not can_create(user, post_type):
        raise _forbidden(user, post_type.cap.create_posts)

    post_status = body.status or PostStatus.DRAFT
    if not can_set_status(user, post_type, post_status):
        raise _forbidden(user, post_type.cap.publish_posts)

    post = await post_service.create_post(db, post_type, user, body.title, body.content, post_status)
    return to_json_response(await prepare_response(post, post_type, request), status.HTTP_201_CREATED)


@router.get("/{rest_base}/{post_id}")
async def get_item(
    post_id: int,
    request: Request,
    post_type: PostTypeObject = Depends(get_rest_post_type),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post(db, post_id, post_type)
    if not can_read_post(user, post, post_type):
        raise _forbidden(user)

    return to_json_response(await prepare_response(post, post_type, request))


@router.api_route("/{rest_base}/{post_id}", methods=["POST", "PUT", "PATCH"])
async def update_item(
    post_id: int,
    body: PostWrite,
    request: Request,
    post_type: PostTypeObject = Depends(get_rest_post_type),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post(db, post_id, post_type)
    if not can_edit_post(user, post, post_type):
        raise _forbidden(user, post_type.cap.edit_others_posts)

    if body.status is not None and body.status != post.status and not can_set_status(user, post_type, body.status):
        raise _forbidden(user, post_type.cap.publish_posts)

    post = await post_service.update_post(db, post, post_type, user, body.title, body.content, body.status)
    return to_json_response(await prepare_response(post, post_type, request))


@router.get("/{rest_base}/{post_id}/revisions", response_model=list[PostRevisionResponse])
async def list_revisions(
    post_id: int,
    post_type: PostTypeObject = Depends(get_rest_post_type),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not post_type.supports("revisions"):
        raise PostTypeNotFoundError(post_type.rest_base)

    post = await post_service.get_post(db, post_id, post_type)
    if not can_edit_post(user, post, post_type):
        raise _forbidden(user, post_type.cap.edit_others_posts)

    revisions = await revision_service.get_revisions(post.id, db)
    return [PostRevisionResponse.model_validate(revision) for revision in revisions]
