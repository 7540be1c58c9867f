"""
Plugin Base Classes

PluginMeta: declarative metadata for a plugin (name, version, hooks, filters).
PluginBase: abstract base class all plugins must subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class PluginMeta:
    """
    Declarative metadata describing a plugin.

    Attributes:
        name:          Machine-readable slug, e.g. "json_post_type".
        version:       Semver string, e.g. "1.0.0".
        description:   Human-readable description.
        author:        Plugin author.
        hooks:         Hook names this plugin subscribes to.
        filters:       Filter names this plugin subscribes to.
        priority:      Dispatch order among subscribers; lower runs first.
        config_schema: JSON Schema fragments describing configurable options.
    """

    name: str
    version: str
    description: str
    author: str = "JSON Post Type Team"
    hooks: list[str] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)
    priority: int = 10
    config_schema: dict[str, Any] = field(default_factory=dict)


class PluginBase(ABC):
    """
    Abstract base class for all plugins.

    Subclasses must implement the `meta` property. Lifecycle and dispatch
    methods default to no-ops so subclasses only override what they need.
    """

    @property
    @abstractmethod
    def meta(self) -> PluginMeta:
        """Return the plugin's metadata."""
        ...

    async def on_load(self, config: dict[str, Any]) -> None:  # noqa: B027
        """Called once at startup with the plugin's persisted config dict."""

    async def on_unload(self) -> None:  # noqa: B027
        """Called when the application shuts down."""

    async def handle_hook(self, hook_name: str, payload: dict[str, Any]) -> Any:
        """
        Receive a hook event declared in PluginMeta.hooks.

        Returns:
            Any value (ignored by fire_hook unless needed by caller).
        """
        return None

    async def apply_filter(self, filter_name: str, value: Any, **context: Any) -> Any:
        """
        Transform a value for a filter declared in PluginMeta.filters.

        Args:
            filter_name: The filter constant, e.g. "json_post_type_args".
            value:       Output of the previous subscriber.
            context:     Extra read-only arguments supplied by the caller.

        Returns:
            The value handed to the next subscriber. The default returns
            `value` unchanged.
        """
        return value
