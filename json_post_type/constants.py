"""
Constants for the JSON post type.

Names shared by the plugin, the REST layer and the admin screens.
"""

from enum import Enum

# Content type name and default REST base
POST_TYPE = "json"
DEFAULT_REST_BASE = "json"

# Capabilities granted to the configured roles
JSON_CAPABILITIES: tuple[str, ...] = (
    "edit_json",
    "edit_others_json",
    "publish_json",
    "read_private_json",
)


class PostStatus(str, Enum):
    """Lifecycle states of a post."""

    AUTO_DRAFT = "auto-draft"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    PUBLISH = "publish"


# Statuses that require the publish capability to enter
PUBLISHING_STATUSES = frozenset({PostStatus.PUBLISH, PostStatus.PRIVATE})


class RoleName(str, Enum):
    """Enumeration of role names seeded at startup."""

    ADMINISTRATOR = "administrator"
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"


# Base capabilities of the seeded roles
DEFAULT_ROLE_CAPABILITIES: dict[str, dict[str, bool]] = {
    RoleName.ADMINISTRATOR.value: {"read": True, "manage_options": True, "list_users": True},
    RoleName.EDITOR.value: {"read": True},
    RoleName.AUTHOR.value: {"read": True},
    RoleName.CONTRIBUTOR.value: {"read": True},
    RoleName.SUBSCRIBER.value: {"read": True},
}

DEFAULT_ROLE = RoleName.SUBSCRIBER
