from .editor import register_editor, render_json_editor, render_rest_url, rest_url_for
from .screen import EditScreen, MetaBox, build_edit_screen

__all__ = [
    "EditScreen",
    "MetaBox",
    "build_edit_screen",
    "register_editor",
    "render_json_editor",
    "render_rest_url",
    "rest_url_for",
]
