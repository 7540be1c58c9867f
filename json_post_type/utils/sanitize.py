"""
Input Sanitization Utilities

Titles are stored as plain text; URLs printed into admin pages are
restricted to safe protocols. Post content is never sanitized: it is a
JSON document and must round-trip unchanged.
"""

import html
import re
from typing import Optional

import bleach

# Allowed protocols for URLs
ALLOWED_PROTOCOLS = ['http', 'https']


def sanitize_plain_text(text: Optional[str]) -> str:
    """
    Strip all HTML tags and return plain text only.
    Used for post titles.

    Args:
        text: The text to sanitize

    Returns:
        Plain text with HTML tags stripped
    """
    if text is None:
        return ""

    # bleach returns entity-escaped text; titles are stored unescaped and escaped on output
    cleaned = html.unescape(bleach.clean(text, tags=[], strip=True))

    # Normalize whitespace
    cleaned = re.sub(r'\s+', ' ', cleaned).strip()

    return cleaned


def sanitize_url(url: Optional[str]) -> Optional[str]:
    """
    Validate and sanitize URLs to prevent javascript: and data: URLs.

    Args:
        url: The URL to sanitize

    Returns:
        Sanitized URL or None if invalid
    """
    if not url:
        return None

    url = url.strip()
    url_lower = url.lower()

    dangerous_protocols = ['javascript:', 'data:', 'vbscript:', 'file:']
    if any(url_lower.startswith(proto) for proto in dangerous_protocols):
        return None

    # If no protocol, assume https://
    if not any(url_lower.startswith(f'{proto}:') for proto in ALLOWED_PROTOCOLS):
        if not url_lower.startswith('//') and not url_lower.startswith('/'):
            url = f'https://{url}'

    return url
