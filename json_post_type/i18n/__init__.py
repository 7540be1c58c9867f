"""
i18n (Internationalization) package

Locale negotiation for admin screens and a small message catalogue for
the strings the JSON post type prints.
"""

from .locale import (
    LANGUAGE_NAMES,
    SUPPORTED_LOCALES,
    parse_accept_language,
    resolve_locale,
    translate,
)

__all__ = [
    "LANGUAGE_NAMES",
    "SUPPORTED_LOCALES",
    "parse_accept_language",
    "resolve_locale",
    "translate",
]
