"""
Plugin Registry

PluginRegistry: in-process singleton that stores registered plugins and
dispatches hooks and filters to subscribers.

Subscribers run in ascending PluginMeta.priority, then registration order.
Hooks are fire-and-forget: exceptions are caught, logged, and execution
continues. Filters chain values: a raising subscriber is logged and its
input value is handed to the next subscriber unchanged.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from json_post_type.plugins.base import PluginBase

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    In-process registry for plugins.

    Stores registered plugins by name and maintains indexes of hook and
    filter subscriptions for dispatch.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, PluginBase] = {}
        self._hook_subscriptions: dict[str, list[PluginBase]] = defaultdict(list)
        self._filter_subscriptions: dict[str, list[PluginBase]] = defaultdict(list)

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, plugin: PluginBase) -> None:
        """Register a plugin and index its subscriptions, replacing any plugin of the same name."""
        if plugin.meta.name in self._plugins:
            self.unregister(plugin.meta.name)

        self._plugins[plugin.meta.name] = plugin
        for hook in plugin.meta.hooks:
            self._subscribe(self._hook_subscriptions[hook], plugin)
        for filter_name in plugin.meta.filters:
            self._subscribe(self._filter_subscriptions[filter_name], plugin)
        logger.info("Plugin registered: %s v%s", plugin.meta.name, plugin.meta.version)

    def unregister(self, name: str) -> PluginBase | None:
        """Remove a plugin and all of its subscriptions."""
        plugin = self._plugins.pop(name, None)
        if plugin is None:
            return None
        for subscribers in (*self._hook_subscriptions.values(), *self._filter_subscriptions.values()):
            if plugin in subscribers:
                subscribers.remove(plugin)
        return plugin

    @staticmethod
    def _subscribe(subscribers: list[PluginBase], plugin: PluginBase) -> None:
        subscribers.append(plugin)
        # stable sort keeps registration order within a priority
        subscribers.sort(key=lambda p: p.meta.priority)

    def clear(self) -> None:
        self._plugins.clear()
        self._hook_subscriptions.clear()
        self._filter_subscriptions.clear()

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, name: str) -> PluginBase | None:
        """Return the plugin with the given name, or None if not registered."""
        return self._plugins.get(name)

    def all_plugins(self) -> list[PluginBase]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def is_registered(self, name: str) -> bool:
        """Return True if a plugin with the given name has been registered."""
        return name in self._plugins

    def has_filter(self, filter_name: str) -> bool:
        return bool(self._filter_subscriptions.get(filter_name))

    # ── Dispatch ──────────────────────────────────────────────────────────────

    async def fire_hook(self, hook_name: str, payload: dict[str, Any] | None = None) -> list[Any]:
        """
        Fire a hook to all subscribing plugins.

        Args:
            hook_name: Hook constant from json_post_type.plugins.hooks.
            payload:   Arbitrary data passed to each subscriber.

        Returns:
            List of return values from each subscriber that did not raise.
        """
        payload = payload if payload is not None else {}
        results: list[Any] = []
        for plugin in list(self._hook_subscriptions.get(hook_name, [])):
            try:
                result = await plugin.handle_hook(hook_name, payload)
                results.append(result)
            except Exception as exc:
                logger.warning(
                    "Plugin %s hook %s raised: %s",
                    plugin.meta.name,
                    hook_name,
                    exc,
                )
        return results

    async def apply_filters(self, filter_name: str, value: Any, **context: Any) -> Any:
        """
        Pass `value` through every plugin subscribed to `filter_name`.

        Args:
            filter_name: Filter constant from json_post_type.plugins.hooks.
            value:       Initial value.
            context:     Extra arguments forwarded to each subscriber.

        Returns:
            The value returned by the last subscriber, or `value` when
            nothing is subscribed.
        """
        for plugin in list(self._filter_subscriptions.get(filter_name, [])):
            try:
                value = await plugin.apply_filter(filter_name, value, **context)
            except Exception as exc:
                logger.warning(
                    "Plugin %s filter %s raised: %s",
                    plugin.meta.name,
                    filter_name,
                    exc,
                )
        return value


# ── Global singleton ──────────────────────────────────────────────────────────
plugin_registry = PluginRegistry()
