"""
REST Response

RestResponse carries the data of one outbound REST representation together
with its hypermedia links until it is serialized.
"""

from __future__ import annotations

from typing import Any, Union

Data = Union[dict[str, Any], list[Any]]


class RestResponse:
    """Outbound REST representation with hypermedia links kept apart from the data."""

    def __init__(self, data: Data, status_code: int = 200, headers: dict[str, str] | None = None) -> None:
        self.data = data
        self.status_code = status_code
        self.headers: dict[str, str] = dict(headers or {})
        self._links: dict[str, list[dict[str, Any]]] = {}

    def add_link(self, rel: str, href: str, **attributes: Any) -> None:
        self._links.setdefault(rel, []).append({"href": href, **attributes})

    def remove_link(self, rel: str, href: str | None = None) -> None:
        """Remove every link under `rel`, or only the one pointing at `href`."""
        if href is None:
            self._links.pop(rel, None)
            return
        remaining = [link for link in self._links.get(rel, []) if link["href"] != href]
        if remaining:
            self._links[rel] = remaining
        else:
            self._links.pop(rel, None)

    def get_links(self) -> dict[str, list[dict[str, Any]]]:
        return {rel: list(links) for rel, links in self._links.items()}

    def to_payload(self) -> Data:
        """Data as sent on the wire; links are embedded as `_links` on object payloads."""
        if self._links and isinstance(self.data, dict):
            return {**self.data, "_links": self.get_links()}
        return self.data
