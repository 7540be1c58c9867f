"""
Posts controller

Builds the generic REST representation of a post and runs it through the
post type's `rest_prepare_<type>` filter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import Request
from fastapi.responses import JSONResponse

from json_post_type.config import settings
from json_post_type.plugins.hooks import rest_prepare_filter
from json_post_type.plugins.registry import PluginRegistry, plugin_registry
from json_post_type.rest.response import RestResponse

if TYPE_CHECKING:
    from json_post_type.models import Post
    from json_post_type.post_types import PostTypeObject


def rest_root(request: Request) -> str:
    """Absolute URL of the REST namespace, e.g. http://host/wp-json/wp/v2."""
    return "{}{}/{}".format(
        str(request.base_url).rstrip("/"),
        settings.rest_prefix.rstrip("/"),
        settings.rest_namespace.strip("/"),
    )


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


def prepare_item_for_response(post: Post, post_type: PostTypeObject, request: Request) -> RestResponse:
    data: dict[str, Any] = {
        "id": post.id,
        "date": _isoformat(post.created_at),
        "modified": _isoformat(post.updated_at),
        "status": post.status.value,
        "type": post.post_type,
        "author": post.author_id,
        "title": post.title,
        "content": post.content,
    }
    response = RestResponse(data)

    root = rest_root(request)
    collection = f"{root}/{post_type.rest_base}"
    response.add_link("self", f"{collection}/{post.id}")
    response.add_link("collection", collection)
    response.add_link("about", f"{root}/types/{post_type.name}")
    if post.author_id is not None:
        response.add_link("author", f"{root}/users/{post.author_id}", embeddable=True)
    if post_type.supports("revisions"):
        response.add_link("version-history", f"{collection}/{post.id}/revisions")
    return response


async def prepare_response(
    post: Post,
    post_type: PostTypeObject,
    request: Request,
    registry: PluginRegistry = plugin_registry,
) -> RestResponse:
    response = prepare_item_for_response(post, post_type, request)
    return await registry.apply_filters(
        rest_prepare_filter(post_type.name),
        response,
        post=post,
        request=request,
    )


def to_json_response(response: RestResponse, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        content=response.to_payload(),
        status_code=status_code or response.status_code,
        headers=response.headers or None,
    )
