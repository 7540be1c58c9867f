"""
Edit Screen

EditScreen collects what the admin edit page of a single post renders:
meta boxes, enqueued scripts and styles, and the callbacks that print
before the permalink area. Post types add to it from their
`register_meta_box_cb`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from markupsafe import Markup

if TYPE_CHECKING:
    from json_post_type.models import Post
    from json_post_type.post_types import PostTypeObject

META_BOX_CONTEXTS = ("normal", "side", "advanced")
META_BOX_PRIORITIES = ("high", "core", "default", "low")


@dataclass
class MetaBox:
    id: str
    title: str
    callback: Callable[[Post, EditScreen], str]
    context: str = "advanced"
    priority: str = "default"

    def render(self, post: Post, screen: EditScreen) -> Markup:
        return Markup(self.callback(post, screen))


@dataclass
class EditScreen:
    post: Post
    post_type: PostTypeObject
    base_url: str
    locale: str = "en"
    scripts: dict[str, str] = field(default_factory=dict)
    styles: dict[str, str] = field(default_factory=dict)
    meta_boxes: list[MetaBox] = field(default_factory=list)
    before_permalink: list[Callable[[Post, EditScreen], str]] = field(default_factory=list)

    def enqueue_script(self, handle: str, src: str) -> None:
        self.scripts.setdefault(handle, src)

    def enqueue_style(self, handle: str, src: str) -> None:
        self.styles.setdefault(handle, src)

    def add_meta_box(
        self,
        box_id: str,
        title: str,
        callback: Callable[[Post, EditScreen], str],
        context: str = "advanced",
        priority: str = "default",
    ) -> None:
        if context not in META_BOX_CONTEXTS:
            raise ValueError(f"Unknown meta box context: {context}")
        if priority not in META_BOX_PRIORITIES:
            raise ValueError(f"Unknown meta box priority: {priority}")
        self.meta_boxes = [box for box in self.meta_boxes if box.id != box_id]
        self.meta_boxes.append(MetaBox(box_id, title, callback, context, priority))

    def add_before_permalink(self, callback: Callable[[Post, EditScreen], str]) -> None:
        self.before_permalink.append(callback)

    def meta_boxes_for(self, context: str) -> list[MetaBox]:
        """Meta boxes of one context, highest priority first."""
        boxes = [box for box in self.meta_boxes if box.context == context]
        return sorted(boxes, key=lambda box: META_BOX_PRIORITIES.index(box.priority))

    def render_before_permalink(self) -> Markup:
        return Markup("").join(Markup(callback(self.post, self)) for callback in self.before_permalink)

    def template_context(self) -> dict[str, Any]:
        return {
            "post": self.post,
            "post_type": self.post_type,
            "scripts": self.scripts,
            "styles": self.styles,
            "before_permalink": self.render_before_permalink(),
            "meta_boxes": {
                context: [(box, box.render(self.post, self)) for box in self.meta_boxes_for(context)]
                for context in META_BOX_CONTEXTS
            },
        }


def build_edit_screen(post: Post, post_type: PostTypeObject, base_url: str, locale: str = "en") -> EditScreen:
    """Create the edit screen of `post` and let its post type populate it."""
    screen = EditScreen(post=post, post_type=post_type, base_url=base_url, locale=locale)
    if post_type.args.register_meta_box_cb is not None:
        post_type.args.register_meta_box_cb(screen)
    return screen
