"""
Plugin System Tests

Pure unit tests; no database.

Test classes:
    TestPluginMeta        - PluginMeta dataclass
    TestPluginBase        - PluginBase abstract class
    TestPluginRegistry    - registration, fire_hook and apply_filters
    TestPluginLoader      - config I/O, class import, initialize_plugins
    TestJSONPostTypePlugin - registration of the json type and its REST filter
    TestPluginHooks       - hook and filter name constants
"""

from __future__ import annotations

import dataclasses
import inspect
import json
from typing import Any

import pytest

from json_post_type.constants import POST_TYPE
from json_post_type.models.post import Post
from json_post_type.plugins.base import PluginBase, PluginMeta
from json_post_type.plugins.registry import PluginRegistry
from json_post_type.post_types import post_type_registry
from json_post_type.rest.response import RestResponse


def write_plugins_config(config: dict[str, Any]) -> None:
    from json_post_type.plugins import loader

    loader._PLUGINS_CONFIG_FILE.write_text(json.dumps(config), encoding="utf-8")


class RecordingPlugin(PluginBase):
    """Records hook calls and appends its name to list values passed through filters."""

    def __init__(self, name: str = "recorder", priority: int = 10, hooks=None, filters=None, fail: bool = False):
        self._meta = PluginMeta(
            name=name,
            version="1.0.0",
            description="test plugin",
            hooks=list(hooks or []),
            filters=list(filters or []),
            priority=priority,
        )
        self.fail = fail
        self.calls: list[tuple[str, dict]] = []

    @property
    def meta(self) -> PluginMeta:
        return self._meta

    async def handle_hook(self, hook_name: str, payload: dict[str, Any]) -> Any:
        self.calls.append((hook_name, payload))
        if self.fail:
            raise RuntimeError("boom")
        return self.meta.name

    async def apply_filter(self, filter_name: str, value: Any, **context: Any) -> Any:
        if self.fail:
            raise RuntimeError("boom")
        return [*value, self.meta.name]


class RestBasePlugin(PluginBase):
    """Extra plugin that moves the json type to another REST base."""

    @property
    def meta(self) -> PluginMeta:
        return PluginMeta(
            name="rest_base_override",
            version="1.0.0",
            description="Serve JSON documents under /documents",
            filters=["json_post_type_args"],
        )

    async def apply_filter(self, filter_name: str, value: Any, **context: Any) -> Any:
        return value.model_copy(update={"rest_base": "documents"})


class LinkAddingPlugin(PluginBase):
    """Adds a link to outbound json responses; runs before the built-in shaper."""

    @property
    def meta(self) -> PluginMeta:
        return PluginMeta(
            name="link_adder",
            version="1.0.0",
            description="Adds a link",
            filters=["rest_prepare_json"],
            priority=10,
        )

    async def apply_filter(self, filter_name: str, value: Any, **context: Any) -> Any:
        value.add_link("extra", "http://testserver/extra")
        return value


# ══════════════════════════════════════════════════════════════════════════════
# 1. TestPluginMeta
# ══════════════════════════════════════════════════════════════════════════════


class TestPluginMeta:
    def test_pluginmeta_is_dataclass(self):
        assert dataclasses.is_dataclass(PluginMeta)

    def test_pluginmeta_defaults(self):
        m = PluginMeta(name="test", version="1.0.0", description="desc")
        assert m.author == "JSON Post Type Team"
        assert m.hooks == []
        assert m.filters == []
        assert m.priority == 10
        assert m.config_schema == {}

    def test_pluginmeta_mutable_defaults_isolated(self):
        m1 = PluginMeta(name="a", version="1.0.0", description="d")
        m2 = PluginMeta(name="b", version="1.0.0", description="d")
        m1.hooks.append("x")
        m1.filters.append("y")
        assert m2.hooks == []
        assert m2.filters == []


# ══════════════════════════════════════════════════════════════════════════════
# 2. TestPluginBase
# ══════════════════════════════════════════════════════════════════════════════


class TestPluginBase:
    def test_is_abstract(self):
        assert inspect.isabstract(PluginBase)
        with pytest.raises(TypeError):
            PluginBase()

    async def test_default_hook_returns_none(self):
        plugin = RestBasePlugin()
        assert await plugin.handle_hook("init", {}) is None

    async def test_default_filter_returns_value(self):
        plugin = LinkAddingPlugin()
        assert await PluginBase.apply_filter(plugin, "anything", 5) == 5

    async def test_default_lifecycle_is_noop(self):
        plugin = RestBasePlugin()
        assert await plugin.on_load({}) is None
        assert await plugin.on_unload() is None


# ══════════════════════════════════════════════════════════════════════════════
# 3. TestPluginRegistry
# ══════════════════════════════════════════════════════════════════════════════


class TestPluginRegistry:
    def test_register_and_lookup(self):
        registry = PluginRegistry()
        plugin = RecordingPlugin(hooks=["init"])
        registry.register(plugin)

        assert registry.is_registered("recorder")
        assert registry.get("recorder") is plugin
        assert registry.all_plugins() == [plugin]

    def test_register_same_name_replaces(self):
        registry = PluginRegistry()
        first = RecordingPlugin(hooks=["init"])
        second = RecordingPlugin(hooks=["init"])
        registry.register(first)
        registry.register(second)

        assert registry.all_plugins() == [second]

    async def test_replaced_plugin_no_longer_receives_hooks(self):
        registry = PluginRegistry()
        first = RecordingPlugin(hooks=["init"])
        second = RecordingPlugin(hooks=["init"])
        registry.register(first)
        registry.register(second)

        await registry.fire_hook("init")

        assert first.calls == []
        assert len(second.calls) == 1

    def test_unregister(self):
        registry = PluginRegistry()
        registry.register(RecordingPlugin(filters=["f"]))

        assert registry.unregister("recorder") is not None
        assert registry.unregister("recorder") is None
        assert not registry.has_filter("f")

    async def test_fire_hook_passes_payload(self):
        registry = PluginRegistry()
        plugin = RecordingPlugin(hooks=["init"])
        registry.register(plugin)

        results = await registry.fire_hook("init", {"key": "value"})

        assert results == ["recorder"]
        assert plugin.calls == [("init", {"key": "value"})]

    async def test_fire_hook_without_subscribers(self):
        assert await PluginRegistry().fire_hook("init") == []

    async def test_fire_hook_isolates_failures(self):
        registry = PluginRegistry()
        broken = RecordingPlugin(name="broken", hooks=["init"], fail=True)
        healthy = RecordingPlugin(name="healthy", hooks=["init"])
        registry.register(broken)
        registry.register(healthy)

        results = await registry.fire_hook("init")

        assert results == ["healthy"]
        assert len(broken.calls) == 1

    async def test_apply_filters_without_subscribers_returns_value(self):
        assert await PluginRegistry().apply_filters("f", ["start"]) == ["start"]

    async def test_apply_filters_runs_in_priority_order(self):
        registry = PluginRegistry()
        registry.register(RecordingPlugin(name="late", priority=99, filters=["f"]))
        registry.register(RecordingPlugin(name="early", priority=5, filters=["f"]))
        registry.register(RecordingPlugin(name="middle", priority=10, filters=["f"]))

        assert await registry.apply_filters("f", []) == ["early", "middle", "late"]

    async def test_apply_filters_keeps_registration_order_within_priority(self):
        registry = PluginRegistry()
        registry.register(RecordingPlugin(name="first", filters=["f"]))
        registry.register(RecordingPlugin(name="second", filters=["f"]))

        assert await registry.apply_filters("f", []) == ["first", "second"]

    async def test_apply_filters_skips_failing_subscriber(self):
        registry = PluginRegistry()
        registry.register(RecordingPlugin(name="a", priority=1, filters=["f"]))
        registry.register(RecordingPlugin(name="broken", priority=2, filters=["f"], fail=True))
        registry.register(RecordingPlugin(name="c", priority=3, filters=["f"]))

        assert await registry.apply_filters("f", []) == ["a", "c"]

    def test_clear(self):
        registry = PluginRegistry()
        registry.register(RecordingPlugin(filters=["f"]))
        registry.clear()

        assert registry.all_plugins() == []
        assert not registry.has_filter("f")


# ══════════════════════════════════════════════════════════════════════════════
# 4. TestPluginLoader
# ══════════════════════════════════════════════════════════════════════════════


class TestPluginLoader:
    def test_load_defaults_when_file_missing(self):
        from json_post_type.plugins.loader import load_plugins_config

        assert load_plugins_config() == {"json_post_type": {"enabled": True}}

    def test_load_from_file(self):
        from json_post_type.plugins import loader

        write_plugins_config({"json_post_type": {"enabled": True, "response_shape": "wrapped"}})
        assert loader.load_plugins_config()["json_post_type"]["response_shape"] == "wrapped"

    def test_load_defaults_on_corrupt_file(self):
        from json_post_type.plugins import loader

        loader._PLUGINS_CONFIG_FILE.write_text("{not json", encoding="utf-8")
        assert loader.load_plugins_config() == {"json_post_type": {"enabled": True}}

    def test_import_plugin_class_colon_path(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin
        from json_post_type.plugins.loader import import_plugin_class

        path = "json_post_type.plugins.json_post_type_plugin:JSONPostTypePlugin"
        assert import_plugin_class(path) is JSONPostTypePlugin

    def test_import_plugin_class_dotted_path(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin
        from json_post_type.plugins.loader import import_plugin_class

        path = "json_post_type.plugins.json_post_type_plugin.JSONPostTypePlugin"
        assert import_plugin_class(path) is JSONPostTypePlugin

    def test_import_plugin_class_missing_attribute(self):
        from json_post_type.plugins.loader import import_plugin_class

        with pytest.raises(ImportError):
            import_plugin_class("json_post_type.plugins.loader:Missing")

    def test_import_plugin_class_rejects_non_plugins(self):
        from json_post_type.plugins.loader import import_plugin_class

        with pytest.raises(TypeError):
            import_plugin_class("json_post_type.plugins.loader:load_plugins_config")

    async def test_initialize_registers_builtin_and_fires_init(self):
        from json_post_type.plugins.loader import initialize_plugins

        registry = PluginRegistry()
        loaded = await initialize_plugins(registry)

        assert [plugin.meta.name for plugin in loaded] == ["json_post_type"]
        assert post_type_registry.is_registered(POST_TYPE)

    async def test_initialize_skips_disabled_plugins(self):
        from json_post_type.plugins.loader import initialize_plugins

        write_plugins_config({"json_post_type": {"enabled": False}})
        registry = PluginRegistry()

        assert await initialize_plugins(registry) == []
        assert not post_type_registry.is_registered(POST_TYPE)

    async def test_initialize_ignores_unimportable_extra(self):
        from json_post_type.plugins.loader import initialize_plugins

        registry = PluginRegistry()
        loaded = await initialize_plugins(registry, ["no_such_module:Plugin"])

        assert [plugin.meta.name for plugin in loaded] == ["json_post_type"]

    async def test_extra_plugin_filters_post_type_args(self):
        from json_post_type.plugins.loader import initialize_plugins

        registry = PluginRegistry()
        await initialize_plugins(registry, [f"{__name__}:RestBasePlugin"])

        assert post_type_registry.get(POST_TYPE).rest_base == "documents"

    async def test_shutdown_unregisters_post_type(self):
        from json_post_type.plugins.loader import initialize_plugins, shutdown_plugins

        registry = PluginRegistry()
        await initialize_plugins(registry)
        await shutdown_plugins(registry)

        assert registry.all_plugins() == []
        assert not post_type_registry.is_registered(POST_TYPE)


# ══════════════════════════════════════════════════════════════════════════════
# 5. TestJSONPostTypePlugin
# ══════════════════════════════════════════════════════════════════════════════


class TestJSONPostTypePlugin:
    def test_meta(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        meta = JSONPostTypePlugin().meta
        assert meta.name == "json_post_type"
        assert meta.hooks == ["init"]
        assert meta.filters == ["rest_prepare_json"]
        assert meta.priority == 99

    def test_default_args(self):
        from json_post_type.admin.editor import register_editor
        from json_post_type.plugins.json_post_type_plugin import default_post_type_args

        args = default_post_type_args()
        assert args.label == "JSON"
        assert args.labels == {"add_new_item": "Add New JSON"}
        assert args.public is False
        assert args.publicly_queryable is False
        assert args.exclude_from_search is True
        assert args.show_ui is True
        assert args.show_in_nav_menus is False
        assert args.show_in_admin_bar is False
        assert args.menu_position == 50
        assert args.menu_icon == "dashicons-code-standards"
        assert args.capability_type == ("json", "json")
        assert args.hierarchical is False
        assert args.supports == ["title", "revisions"]
        assert args.show_in_rest is True
        assert args.rest_base == "json"
        assert args.register_meta_box_cb is register_editor

    async def test_register_twice_leaves_one_type(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        plugin = JSONPostTypePlugin()
        registry = PluginRegistry()
        await plugin.register_post_type(registry)
        await plugin.register_post_type(registry)

        assert [post_type.name for post_type in post_type_registry.all()] == [POST_TYPE]

    async def test_registered_capabilities(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        post_type = await JSONPostTypePlugin().register_post_type(PluginRegistry())

        assert post_type.cap.edit_posts == "edit_json"
        assert post_type.cap.edit_others_posts == "edit_others_json"
        assert post_type.cap.publish_posts == "publish_json"
        assert post_type.cap.read_private_posts == "read_private_json"

    async def test_ignores_unknown_hook(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        assert await JSONPostTypePlugin().handle_hook("something_else", {}) is None
        assert not post_type_registry.is_registered(POST_TYPE)

    async def test_shaper_runs_after_lower_priority_filters(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        registry = PluginRegistry()
        registry.register(JSONPostTypePlugin())
        registry.register(LinkAddingPlugin())

        post = Post(id=1, post_type=POST_TYPE, content="", title="t")
        response = RestResponse({"id": 1, "content": ""})
        response.add_link("self", "http://testserver/wp-json/wp/v2/json/1")

        shaped = await registry.apply_filters("rest_prepare_json", response, post=post)

        # Links added by earlier filters are dropped as well
        assert shaped.get_links() == {}

    async def test_response_shape_from_config(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        plugin = JSONPostTypePlugin()
        await plugin.on_load({"response_shape": "wrapped"})
        post = Post(id=4, post_type=POST_TYPE, content='{"a": 1}', title="t")

        shaped = await plugin.apply_filter("rest_prepare_json", RestResponse({"id": 4}), post=post)

        assert shaped.data == {"id": 4, "document": {"a": 1}}

    async def test_other_filters_pass_through(self):
        from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

        assert await JSONPostTypePlugin().apply_filter("json_post_type_args", "value") == "value"


# ══════════════════════════════════════════════════════════════════════════════
# 6. TestPluginHooks
# ══════════════════════════════════════════════════════════════════════════════


class TestPluginHooks:
    def test_rest_prepare_filter_name(self):
        from json_post_type.plugins.hooks import FILTER_REST_PREPARE_JSON, rest_prepare_filter

        assert rest_prepare_filter("book") == "rest_prepare_book"
        assert FILTER_REST_PREPARE_JSON == "rest_prepare_json"

    def test_master_lists(self):
        from json_post_type.plugins.hooks import ALL_FILTERS, ALL_HOOKS

        assert ALL_HOOKS == ["init"]
        assert set(ALL_FILTERS) == {"json_post_type_args", "json_post_type_roles", "rest_prepare_json"}
        assert len(ALL_FILTERS) == len(set(ALL_FILTERS))
