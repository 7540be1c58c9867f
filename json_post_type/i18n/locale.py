"""
Locale helpers

Pure functions for locale handling:
- Accept-Language header parsing with quality-value (q=) support
- Message lookup in the built-in catalogue
"""

from __future__ import annotations

# ── Constants ─────────────────────────────────────────────────────────────────

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "fr": "Français",
    "de": "Deutsch",
}

SUPPORTED_LOCALES: list[str] = list(LANGUAGE_NAMES)

# Source string → translations; English is the source language
_CATALOGUE: dict[str, dict[str, str]] = {
    "REST API URL:": {"fr": "URL de l'API REST :", "de": "REST-API-URL:"},
    "JSON Editor": {"fr": "Éditeur JSON", "de": "JSON-Editor"},
    "Add New JSON": {"fr": "Ajouter un JSON", "de": "Neues JSON hinzufügen"},
    "Save Draft": {"fr": "Enregistrer le brouillon", "de": "Entwurf speichern"},
    "Publish": {"fr": "Publier", "de": "Veröffentlichen"},
    "Update": {"fr": "Mettre à jour", "de": "Aktualisieren"},
    "Revisions": {"fr": "Révisions", "de": "Revisionen"},
    "Restore": {"fr": "Restaurer", "de": "Wiederherstellen"},
    "Title": {"fr": "Titre", "de": "Titel"},
    "Status": {"fr": "État", "de": "Status"},
    "Last Modified": {"fr": "Dernière modification", "de": "Zuletzt geändert"},
    "Grant capabilities": {"fr": "Accorder les droits", "de": "Berechtigungen vergeben"},
    "(no title)": {"fr": "(sans titre)", "de": "(kein Titel)"},
    "Previous page": {"fr": "Page précédente", "de": "Vorherige Seite"},
    "Next page": {"fr": "Page suivante", "de": "Nächste Seite"},
    "Page": {"fr": "Page", "de": "Seite"},
    "of": {"fr": "sur", "de": "von"},
}


# ── Public helpers ────────────────────────────────────────────────────────────


def translate(text: str, locale: str = "en") -> str:
    """Return `text` translated into `locale`, or `text` itself when no translation exists.

    Only the base language tag is used, so "fr-CA" resolves to "fr".
    """
    base = locale.split("-")[0].lower()
    return _CATALOGUE.get(text, {}).get(base, text)


def _weighted_tags(header: str) -> list[tuple[float, str]]:
    """(q, tag) pairs of an Accept-Language header; a malformed q counts as 1.0."""
    tags: list[tuple[float, str]] = []
    for part in filter(None, (item.strip() for item in header.split(","))):
        tag, _, params = part.partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                pass
        tags.append((quality, tag.strip().lower()))
    return tags


def parse_accept_language(header: str, supported: list[str]) -> str | None:
    """Best locale in `supported` for an Accept-Language header, or None.

    Tags are tried by descending q (header order on ties); each tag matches
    exactly or by its base language, so "de-AT" selects "de".
    """
    if not header:
        return None

    by_code = {code.lower(): code for code in supported}
    for _, tag in sorted(_weighted_tags(header), key=lambda pair: -pair[0]):
        match = by_code.get(tag) or by_code.get(tag.split("-")[0])
        if match:
            return match
    return None


def resolve_locale(header: str | None, default: str = "en") -> str:
    """Locale for a request given its Accept-Language header."""
    return parse_accept_language(header or "", SUPPORTED_LOCALES) or default
