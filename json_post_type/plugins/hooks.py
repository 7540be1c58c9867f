"""
Hook and Filter Name Constants

Hooks are fire-and-forget events; filters pass a value through each
subscriber and return the result.
"""

from __future__ import annotations

from json_post_type.constants import POST_TYPE

# ── Hooks ─────────────────────────────────────────────────────────────────────
HOOK_INIT = "init"

# ── Filters ───────────────────────────────────────────────────────────────────
FILTER_POST_TYPE_ARGS = "json_post_type_args"
FILTER_POST_TYPE_ROLES = "json_post_type_roles"


def rest_prepare_filter(post_type: str) -> str:
    """Name of the filter applied to outbound REST responses of `post_type`."""
    return f"rest_prepare_{post_type}"


FILTER_REST_PREPARE_JSON = rest_prepare_filter(POST_TYPE)

# ── Master lists ──────────────────────────────────────────────────────────────
ALL_HOOKS: list[str] = [HOOK_INIT]

ALL_FILTERS: list[str] = [
    FILTER_POST_TYPE_ARGS,
    FILTER_POST_TYPE_ROLES,
    FILTER_REST_PREPARE_JSON,
]
