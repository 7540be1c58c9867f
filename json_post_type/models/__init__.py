from .post import Post
from .revision import PostRevision
from .user import Role, User

__all__ = [
    "Post",
    "PostRevision",
    "Role",
    "User",
]
