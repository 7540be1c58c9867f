"""
Post Type Registry

PostTypeArgs:    declarative registration arguments for a content type.
PostTypeObject:  a registered type, with its derived capability names.
PostTypeRegistry: in-process store of registered types, keyed by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class PostTypeArgs(BaseModel):
    """
    Registration arguments for a content type.

    Attributes mirror the visibility, capability and REST settings a type
    can be registered with. `capability_type` accepts a single name (plural
    derived by appending "s") or a (singular, plural) pair.
    """

    label: str
    labels: dict[str, str] = Field(default_factory=dict)
    description: str = ""
    public: bool = False
    exclude_from_search: bool = True
    publicly_queryable: bool = False
    show_ui: bool = True
    show_in_nav_menus: bool = False
    show_in_menu: bool = True
    show_in_admin_bar: bool = False
    menu_position: Optional[int] = None
    menu_icon: Optional[str] = None
    capability_type: tuple[str, str] = ("post", "posts")
    hierarchical: bool = False
    supports: list[str] = Field(default_factory=lambda: ["title", "editor"])
    register_meta_box_cb: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    show_in_rest: bool = False
    rest_base: Optional[str] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("capability_type", mode="before")
    @classmethod
    def normalize_capability_type(cls, value: Union[str, list[str], tuple[str, ...]]):
        if isinstance(value, str):
            return (value, f"{value}s")
        if len(value) == 1:
            return (value[0], f"{value[0]}s")
        return tuple(value[:2])


@dataclass(frozen=True)
class PostTypeCapabilities:
    """Capability names a type's access checks are routed through."""

    edit_post: str
    read_post: str
    delete_post: str
    edit_posts: str
    edit_others_posts: str
    delete_posts: str
    publish_posts: str
    read_private_posts: str
    create_posts: str
    read: str = "read"

    @classmethod
    def from_capability_type(cls, singular: str, plural: str) -> PostTypeCapabilities:
        return cls(
            edit_post=f"edit_{singular}",
            read_post=f"read_{singular}",
            delete_post=f"delete_{singular}",
            edit_posts=f"edit_{plural}",
            edit_others_posts=f"edit_others_{plural}",
            delete_posts=f"delete_{plural}",
            publish_posts=f"publish_{plural}",
            read_private_posts=f"read_private_{plural}",
            create_posts=f"edit_{plural}",
        )


@dataclass(frozen=True)
class PostTypeObject:
    name: str
    args: PostTypeArgs
    cap: PostTypeCapabilities

    @property
    def rest_base(self) -> str:
        return self.args.rest_base or self.name

    def supports(self, feature: str) -> bool:
        return feature in self.args.supports

    def to_rest(self) -> dict[str, Any]:
        """Public description of the type as exposed by the types endpoint."""
        return {
            "name": self.args.label,
            "slug": self.name,
            "description": self.args.description,
            "labels": self.args.labels,
            "hierarchical": self.args.hierarchical,
            "supports": {feature: True for feature in self.args.supports},
            "capabilities": {
                "edit_posts": self.cap.edit_posts,
                "edit_others_posts": self.cap.edit_others_posts,
                "publish_posts": self.cap.publish_posts,
                "read_private_posts": self.cap.read_private_posts,
            },
            "rest_base": self.rest_base,
        }


class PostTypeRegistry:
    """
    In-process registry of content types.

    Registering a name that already exists replaces the previous definition,
    so repeated registration always leaves exactly one entry per name.
    """

    def __init__(self) -> None:
        self._types: dict[str, PostTypeObject] = {}

    def register(self, name: str, args: PostTypeArgs) -> PostTypeObject:
        singular, plural = args.capability_type
        post_type = PostTypeObject(
            name=name,
            args=args,
            cap=PostTypeCapabilities.from_capability_type(singular, plural),
        )
        replaced = name in self._types
        self._types[name] = post_type
        logger.info("Post type %s: %s (rest_base=%s)", "re-registered" if replaced else "registered", name, post_type.rest_base)
        return post_type

    def unregister(self, name: str) -> None:
        self._types.pop(name, None)

    def get(self, name: str) -> PostTypeObject | None:
        return self._types.get(name)

    def all(self) -> list[PostTypeObject]:
        return list(self._types.values())

    def is_registered(self, name: str) -> bool:
        return name in self._types

    def get_by_rest_base(self, rest_base: str) -> PostTypeObject | None:
        """Return the REST-visible type served at `rest_base`, if any."""
        for post_type in self._types.values():
            if post_type.args.show_in_rest and post_type.rest_base == rest_base:
                return post_type
        return None

    def clear(self) -> None:
        self._types.clear()


# Global singleton
post_type_registry = PostTypeRegistry()
