from typing import Optional
import logging

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from json_post_type.admin.screen import build_edit_screen
from json_post_type.auth import get_cookie_user
from json_post_type.config import settings
from json_post_type.constants import POST_TYPE, PostStatus
from json_post_type.database import get_db
from json_post_type.exceptions import AuthorizationError, InvalidJSONDocumentError, PostTypeNotFoundError
from json_post_type.i18n import resolve_locale
from json_post_type.models.post import Post
from json_post_type.models.user import User
from json_post_type.post_types import PostTypeObject, post_type_registry
from json_post_type.services import post_service, revision_service
from json_post_type.services.capability_service import (
    can_create,
    can_edit_post,
    can_set_status,
    ensure_capabilities,
    user_can,
)
from json_post_type.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/json")

ADMIN_PER_PAGE = 20

MESSAGES = {
    "saved": "Draft saved.",
    "published": "Published.",
    "updated": "Updated.",
    "restored": "Revision restored.",
    "granted": "Capabilities granted.",
    "unchanged": "All roles already had the capabilities.",
}


def get_admin_post_type() -> PostTypeObject:
    post_type = post_type_registry.get(POST_TYPE)
    if post_type is None or not post_type.args.show_ui:
        raise PostTypeNotFoundError(POST_TYPE)
    return post_type


def _login_redirect() -> RedirectResponse:
    return RedirectResponse("/login", status_code=303)


def _locale(request: Request) -> str:
    return resolve_locale(request.headers.get("accept-language"), settings.default_locale)


def _render_edit(
    request: Request,
    post: Post,
    post_type: PostTypeObject,
    user: User,
    revisions: list,
    message: Optional[str] = None,
    error: Optional[str] = None,
    status_code: int = 200,
):
    locale = _locale(request)
    screen = build_edit_screen(post, post_type, str(request.base_url), locale)
    context = {
        **screen.template_context(),
        "user": user,
        "locale": locale,
        "revisions": revisions,
        "can_publish": can_set_status(user, post_type, PostStatus.PUBLISH),
        "message": message,
        "error": error,
    }
    return templates.TemplateResponse(request, "admin/edit.html", context, status_code=status_code)


@router.get("")
async def list_documents(
    request: Request,
    message: Optional[str] = None,
    page: int = Query(1, ge=1),
    post_type: PostTypeObject = Depends(get_admin_post_type),
    user: Optional[User] = Depends(get_cookie_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return _login_redirect()
    if not user_can(user, post_type.cap.edit_posts):
        raise AuthorizationError(required_capability=post_type.cap.edit_posts)

    statuses = [PostStatus.DRAFT, PostStatus.PENDING, PostStatus.PRIVATE, PostStatus.PUBLISH]
    posts, total, total_pages = await post_service.list_posts(
        db, post_type, user, statuses, page=page, per_page=ADMIN_PER_PAGE
    )
    return templates.TemplateResponse(
        request,
        "admin/list.html",
        {
            "post_type": post_type,
            "posts": posts,
            "user": user,
            "locale": _locale(request),
            "can_manage": user_can(user, "manage_options"),
            "message": MESSAGES.get(message or ""),
            "page": page,
            "total": total,
            "total_pages": total_pages,
        },
    )


@router.post("/capabilities")
async def grant_capabilities(
    user: Optional[User] = Depends(get_cookie_user),
    db: AsyncSession = Depends(get_db),
):
    """Run the capability grant as an explicit administrative action."""
    if user is None:
        return _login_redirect()
    if not user_can(user, "manage_options"):
        raise AuthorizationError(required_capability="manage_options")

    updated = await ensure_capabilities(db)
    return RedirectResponse(f"/admin/json?message={'granted' if updated else 'unchanged'}", status_code=303)


@router.get("/new")
async def new_document(
    post_type: PostTypeObject = Depends(get_admin_post_type),
    user: Optional[User] = Depends(get_cookie_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return _login_redirect()
    if not can_create(user, post_type):
        raise AuthorizationError(required_capability=post_type.cap.create_posts)

    post = await post_service.create_post(db, post_type, user, status=PostStatus.AUTO_DRAFT)
    return RedirectResponse(f"/admin/json/{post.id}/edit", status_code=303)


@router.get("/{post_id:int}/edit")
async def edit_document(
    post_id: int,
    request: Request,
    message: Optional[str] = None,
    post_type: PostTypeObject = Depends(get_admin_post_type),
    user: Optional[User] = Depends(get_cookie_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return _login_redirect()
    post = await post_service.get_post(db, post_id, post_type)
    if not can_edit_post(user, post, post_type):
        raise AuthorizationError(required_capability=post_type.cap.edit_others_posts)

    revisions = await revision_service.get_revisions(post.id, db) if post_type.supports("revisions") else []
    return _render_edit(request, post, post_type, user, revisions, message=MESSAGES.get(message or ""))


@router.post("/{post_id:int}")
async def save_document(
    post_id: int,
    request: Request,
    post_title: str = Form(""),
    content: str = Form(""),
    action: str = Form("save"),
    post_type: PostTypeObject = Depends(get_admin_post_type),
    user: Optional[User] = Depends(get_cookie_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return _login_redirect()
    post = await post_service.get_post(db, post_id, post_type)
    if not can_edit_post(user, post, post_type):
        raise AuthorizationError(required_capability=post_type.cap.edit_others_posts)

    if action == "publish":
        if not can_set_status(user, post_type, PostStatus.PUBLISH):
            raise AuthorizationError(required_capability=post_type.cap.publish_posts)
        new_status = PostStatus.PUBLISH
        message = "updated" if post.status == PostStatus.PUBLISH else "published"
    else:
        new_status = PostStatus.DRAFT if post.status == PostStatus.AUTO_DRAFT else None
        message = "saved"

    try:
        await post_service.update_post(db, post, post_type, user, post_title, content, new_status)
    except InvalidJSONDocumentError as exc:
        # Keep what the user typed on screen
        post.title = post_title
        post.content = content
        revisions = await revision_service.get_revisions(post.id, db)
        return _render_edit(request, post, post_type, user, revisions, error=exc.message, status_code=400)

    return RedirectResponse(f"/admin/json/{post.id}/edit?message={message}", status_code=303)


@router.post("/{post_id:int}/revisions/{revision_id:int}/restore")
async def restore_document_revision(
    post_id: int,
    revision_id: int,
    post_type: PostTypeObject = Depends(get_admin_post_type),
    user: Optional[User] = Depends(get_cookie_user),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        return _login_redirect()
    post = await post_service.get_post(db, post_id, post_type)
    if not can_edit_post(user, post, post_type):
        raise AuthorizationError(required_capability=post_type.cap.edit_others_posts)

    await revision_service.restore_revision(post, revision_id, db, user)
    return RedirectResponse(f"/admin/json/{post.id}/edit?message=restored", status_code=303)
