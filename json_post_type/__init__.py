"""
JSON Post Type

A content type for managing arbitrary JSON documents: an admin JSON editor,
a REST read/write endpoint and role capability grants, built on a small
plugin/hook registry.
"""

__version__ = "1.0.0"
