"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status, headers, and content type. Each call returns a new ``Response``.

    ``content_type=None`` means the response carries no Content-Type header.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str | None = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Header access --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive).

        A ``Content-Type`` set through ``with_header`` takes precedence over
        the ``content_type`` field, matching what is sent on the wire.
        """
        lowered = name.lower()
        for hname, hvalue in self.headers:
            if hname.lower() == lowered:
                return hvalue
        if lowered == "content-type" and self.content_type is not None:
            return self.content_type
        return default

    @property
    def media_type(self) -> str | None:
        """The effective content type without parameters, lowercased."""
        content_type = self.header("content-type")
        if content_type is None:
            return None
        return content_type.split(";", 1)[0].strip().lower()

    @property
    def text(self) -> str:
        """The body as text (UTF-8)."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str | None) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)
