"""
JSON Post Type Plugin

Registers the `json` post type and shapes its REST responses.

Hook subscriptions:
  - init               → register the post type (args pass through json_post_type_args)

Filter subscriptions (priority 99, after other plugins):
  - rest_prepare_json  → replace the envelope with the decoded document, drop links
"""

from __future__ import annotations

import logging
from typing import Any

from json_post_type.admin.editor import register_editor
from json_post_type.config import settings
from json_post_type.constants import DEFAULT_REST_BASE, POST_TYPE
from json_post_type.plugins.base import PluginBase, PluginMeta
from json_post_type.plugins.hooks import FILTER_POST_TYPE_ARGS, FILTER_REST_PREPARE_JSON, HOOK_INIT
from json_post_type.plugins.registry import PluginRegistry, plugin_registry
from json_post_type.post_types import PostTypeArgs, PostTypeObject, post_type_registry
from json_post_type.rest.shaping import SHAPE_DOCUMENT, SHAPE_WRAPPED, shape_json_response

logger = logging.getLogger(__name__)

REST_PREPARE_PRIORITY = 99

_META = PluginMeta(
    name="json_post_type",
    version="1.0.0",
    description="A post type for managing arbitrary JSON documents with a JSON editor and a REST endpoint",
    hooks=[HOOK_INIT],
    filters=[FILTER_REST_PREPARE_JSON],
    priority=REST_PREPARE_PRIORITY,
    config_schema={
        "response_shape": {"type": "string", "enum": [SHAPE_DOCUMENT, SHAPE_WRAPPED], "default": SHAPE_DOCUMENT},
    },
)


def default_post_type_args() -> PostTypeArgs:
    return PostTypeArgs(
        label="JSON",
        labels={"add_new_item": "Add New JSON"},
        description="A post type that stores arbitrary JSON configurations in its post content",
        public=False,
        exclude_from_search=True,
        publicly_queryable=False,
        show_ui=True,
        show_in_nav_menus=False,
        show_in_menu=True,
        show_in_admin_bar=False,
        menu_position=50,
        menu_icon="dashicons-code-standards",
        capability_type=("json", "json"),
        hierarchical=False,
        supports=["title", "revisions"],
        register_meta_box_cb=register_editor,
        show_in_rest=True,
        rest_base=DEFAULT_REST_BASE,
    )


class JSONPostTypePlugin(PluginBase):
    """Content-type provider for JSON documents."""

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}

    @property
    def meta(self) -> PluginMeta:
        return _META

    @property
    def response_shape(self) -> str:
        return self._config.get("response_shape", settings.rest_response_shape)

    async def on_load(self, config: dict[str, Any]) -> None:
        self._config = config
        logger.debug("JSONPostTypePlugin loaded (response_shape=%s)", self.response_shape)

    async def on_unload(self) -> None:
        post_type_registry.unregister(POST_TYPE)

    async def handle_hook(self, hook_name: str, payload: dict[str, Any]) -> PostTypeObject | None:
        if hook_name == HOOK_INIT:
            return await self.register_post_type(payload.get("registry", plugin_registry))
        return None

    async def apply_filter(self, filter_name: str, value: Any, **context: Any) -> Any:
        if filter_name == FILTER_REST_PREPARE_JSON:
            return shape_json_response(value, context["post"], shape=self.response_shape)
        return value

    async def register_post_type(self, registry: PluginRegistry = plugin_registry) -> PostTypeObject:
        args = await registry.apply_filters(FILTER_POST_TYPE_ARGS, default_post_type_args())
        return post_type_registry.register(POST_TYPE, args)
