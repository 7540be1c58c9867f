from .post import PostRevisionResponse, PostWrite
from .token import Token

__all__ = ["PostRevisionResponse", "PostWrite", "Token"]
