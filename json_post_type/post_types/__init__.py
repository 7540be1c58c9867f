"""
Content type registration.

    PostTypeArgs       - registration arguments
    PostTypeObject     - a registered type with derived capabilities
    PostTypeRegistry   - name-keyed registry
    post_type_registry - global singleton registry instance
"""

from .registry import PostTypeArgs, PostTypeCapabilities, PostTypeObject, PostTypeRegistry, post_type_registry

__all__ = ["PostTypeArgs", "PostTypeCapabilities", "PostTypeObject", "PostTypeRegistry", "post_type_registry"]
