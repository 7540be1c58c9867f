"""
JSON editor meta box and REST permalink helper.

The editor is a client-side widget; the server side seeds it with the
stored body and keeps a hidden `content` field that the normal save path
persists.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from json_post_type.config import settings
from json_post_type.constants import PostStatus
from json_post_type.i18n import translate
from json_post_type.templating import render_fragment
from json_post_type.utils.sanitize import sanitize_url

if TYPE_CHECKING:
    from json_post_type.admin.screen import EditScreen
    from json_post_type.models import Post

logger = logging.getLogger(__name__)

EDITOR_HANDLE = "jsoneditor"
EDITOR_META_BOX_ID = "json_editor"
EMPTY_DOCUMENT = "{}"


def register_editor(screen: EditScreen) -> None:
    """Meta box callback of the JSON post type: enqueue assets, add the editor and the REST link."""
    screen.enqueue_script(EDITOR_HANDLE, settings.jsoneditor_script_url)
    screen.enqueue_style(EDITOR_HANDLE, settings.jsoneditor_style_url)

    screen.add_meta_box(
        EDITOR_META_BOX_ID,
        translate("JSON Editor", screen.locale),
        render_json_editor,
        context="normal",
        priority="high",
    )

    screen.add_before_permalink(render_rest_url)


def render_json_editor(post: Post, screen: EditScreen) -> str:
    # JSON is stored in the post body
    content = post.content if post.content else EMPTY_DOCUMENT
    return render_fragment("meta_boxes/json_editor.html", content=content)


def rest_url_for(base_url: str, rest_base: str, post_id: int) -> str:
    return "{}{}/{}/{}/{}".format(
        base_url.rstrip("/"),
        settings.rest_prefix.rstrip("/"),
        settings.rest_namespace.strip("/"),
        rest_base,
        post_id,
    )


def render_rest_url(post: Post, screen: EditScreen) -> str:
    """Link to the REST representation of `post`; empty for unsaved posts."""
    if not post.id or post.status == PostStatus.AUTO_DRAFT:
        return ""

    url = sanitize_url(rest_url_for(screen.base_url, screen.post_type.rest_base, post.id))
    if not url:
        return ""
    return render_fragment(
        "partials/rest_url.html",
        label=translate("REST API URL:", screen.locale),
        url=url,
    )
