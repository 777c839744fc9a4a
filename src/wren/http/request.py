"""Immutable HTTP request facade.

Only the read-only metadata the CMS layer needs: path, route name,
headers, and whether this is the top-level request or an embedded
sub-request. Body access belongs to the hosting framework.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wren.http.headers import Headers


class RequestKind(Enum):
    """Where a request sits in the dispatch tree."""

    MAIN = "main"
    """The top-level request received from the client."""

    SUB = "sub"
    """An embedded request dispatched while rendering another one."""


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``route_name`` is the name of the application route that matched
    ``path``, or ``None`` when no named route matched.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    route_name: str | None = None
    kind: RequestKind = RequestKind.MAIN

    # -- Computed properties --

    @property
    def is_main(self) -> bool:
        """True for the top-level request."""
        return self.kind is RequestKind.MAIN

    @property
    def is_xhr(self) -> bool:
        """True if the client flagged this as an XMLHttpRequest."""
        return self.headers.get("x-requested-with") == "XMLHttpRequest"

    @property
    def is_fragment(self) -> bool:
        """True if this is an htmx fragment request (HX-Request header)."""
        return self.headers.get("hx-request") == "true"

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        *,
        route_name: str | None = None,
        kind: RequestKind = RequestKind.MAIN,
    ) -> Request:
        """Create a Request from an ASGI scope."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(tuple(pair) for pair in scope.get("headers", ()))),
            route_name=route_name,
            kind=kind,
        )
