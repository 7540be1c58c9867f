"""
Plugin Loader

Reads plugin configuration from `data/plugins_config.json`,
instantiates the built-in plugin plus any configured extra plugins, and
fires the `init` hook once everything is registered.
"""

from __future__ import annotations

import copy
import importlib
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from json_post_type.plugins.base import PluginBase
from json_post_type.plugins.hooks import HOOK_INIT

if TYPE_CHECKING:
    from json_post_type.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

# ── Config file location ──────────────────────────────────────────────────────
_PLUGINS_CONFIG_FILE = Path("data/plugins_config.json")

_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "json_post_type": {"enabled": True},
}


# ── Config I/O ────────────────────────────────────────────────────────────────


def load_plugins_config() -> dict[str, dict[str, Any]]:
    """
    Load plugin configuration from disk.

    Returns defaults if the file does not exist or cannot be parsed.
    """
    if _PLUGINS_CONFIG_FILE.exists():
        try:
            return json.loads(_PLUGINS_CONFIG_FILE.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read plugins config: %s", exc)
    return copy.deepcopy(_DEFAULT_CONFIG)


def import_plugin_class(path: str) -> type[PluginBase]:
    """
    Resolve "package.module:ClassName" (or "package.module.ClassName") to a plugin class.

    Raises:
        ImportError: the module or attribute cannot be found.
        TypeError:   the attribute is not a PluginBase subclass.
    """
    module_name, _, class_name = path.partition(":") if ":" in path else path.rpartition(".")
    module = importlib.import_module(module_name)
    try:
        plugin_class = getattr(module, class_name)
    except AttributeError as exc:
        raise ImportError(f"{module_name} has no attribute {class_name}") from exc
    if not (isinstance(plugin_class, type) and issubclass(plugin_class, PluginBase)):
        raise TypeError(f"{path} is not a PluginBase subclass")
    return plugin_class


# ── Startup initialisation ────────────────────────────────────────────────────


async def initialize_plugins(registry: PluginRegistry, extra_plugins: list[str] | None = None) -> list[PluginBase]:
    """
    Load and register plugins, then fire `init`.

    Extra plugins are registered before `init` fires so their filters apply
    to post type registration. A plugin whose config has `"enabled": false`
    is skipped.
    """
    from json_post_type.plugins.json_post_type_plugin import JSONPostTypePlugin

    config = load_plugins_config()

    plugin_classes: list[type[PluginBase]] = [JSONPostTypePlugin]
    for path in extra_plugins or []:
        try:
            plugin_classes.append(import_plugin_class(path))
        except (ImportError, TypeError) as exc:
            logger.error("Could not load plugin %s: %s", path, exc)

    loaded: list[PluginBase] = []
    for plugin_class in plugin_classes:
        plugin = plugin_class()
        plugin_config = config.get(plugin.meta.name, {})
        if not plugin_config.get("enabled", True):
            logger.info("Plugin disabled by config: %s", plugin.meta.name)
            continue
        await plugin.on_load(plugin_config)
        registry.register(plugin)
        loaded.append(plugin)

    await registry.fire_hook(HOOK_INIT, {"registry": registry})

    logger.info("Plugin initialisation complete, %d plugins loaded", len(loaded))
    return loaded


async def shutdown_plugins(registry: PluginRegistry) -> None:
    for plugin in registry.all_plugins():
        try:
            await plugin.on_unload()
        except Exception as exc:
            logger.warning("Plugin %s on_unload raised: %s", plugin.meta.name, exc)
    registry.clear()
