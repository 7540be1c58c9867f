"""
REST response shaping for JSON documents.

The stored body of a JSON post is free text. On the way out it is decoded
and, when it holds a non-empty object or array (or a scalar, as a
one-element list), replaces the generic representation. Hypermedia links
are always dropped.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from json_post_type.rest.response import RestResponse

logger = logging.getLogger(__name__)

SHAPE_DOCUMENT = "document"
SHAPE_WRAPPED = "wrapped"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_json(text: str) -> Any:
    """
    Strict JSON decode.

    Raises ValueError on malformed text, NaN/Infinity, or nesting too deep
    for the decoder.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise ValueError("JSON document is nested too deeply") from exc


def decode_document(text: str | None) -> dict[str, Any] | list[Any] | None:
    """
    Decode a post body into a JSON structure.

    A non-empty object or array is returned as is and a bare scalar is
    wrapped in a one-element list. Empty bodies, malformed JSON, `null`
    and empty structures give None.
    """
    if not text:
        return None
    try:
        decoded = parse_json(text)
    except ValueError as exc:
        logger.debug("Post body is not valid JSON: %s", exc)
        return None
    if decoded is None:
        return None
    if not isinstance(decoded, (dict, list)):
        return [decoded]
    return decoded or None


def shape_json_response(response: RestResponse, post: Any, shape: str = SHAPE_DOCUMENT) -> RestResponse:
    """
    Shape the outbound representation of a JSON post.

    In `document` mode the data is replaced by the decoded body when
    `decode_document` yields one and left as the generic envelope
    otherwise. In `wrapped` mode the data is always `{"id", "document"}`.
    """
    document = decode_document(post.content)

    if shape == SHAPE_WRAPPED:
        response.data = {"id": post.id, "document": document}
    elif document is not None:
        response.data = document

    for rel in list(response.get_links()):
        response.remove_link(rel)

    return response
