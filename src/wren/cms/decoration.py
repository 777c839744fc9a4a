"""Decide whether a response may be wrapped in the site layout.

Decoration adds site chrome (header, footer, navigation) around a
response body. Only full HTML pages answering a top-level, non-async
request qualify, and operators can exclude routes and paths by name or
pattern.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Final

from wren.errors import ConfigurationError
from wren.http.request import RequestKind

if TYPE_CHECKING:
    from wren.config import CmsConfig
    from wren.http.request import Request
    from wren.http.response import Response

logger = logging.getLogger("wren.decoration")

DECORABLE_HEADER: Final = "x-sonata-page-decorable"
"""Response header a handler sets to ``false`` to opt out of decoration."""

_OPT_OUT_VALUES: Final = frozenset({"false", "0", ""})


def _compile(patterns: Iterable[str | re.Pattern[str]], kind: str) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled.append(pattern)
            continue
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            msg = f"Invalid {kind} pattern {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc
    return tuple(compiled)


class DecorationStrategy:
    """Evaluate decoration eligibility for a request/response pair.

    Configured once with three rule sets:

    - *ignore_routes*: exact route names never decorated
    - *ignore_route_patterns*: regexes searched in the route name
    - *ignore_uri_patterns*: regexes searched in the request path

    Patterns are unanchored (``re.search``); write ``^/admin`` to anchor.
    Holds no mutable state, so one instance can serve every request.

    Usage::

        strategy = DecorationStrategy(
            ignore_routes=("login",),
            ignore_route_patterns=(r"^admin_",),
            ignore_uri_patterns=(r"^/api/",),
        )
        if strategy.is_decorable(request, RequestKind.MAIN, response):
            ...
    """

    __slots__ = ("_ignore_route_patterns", "_ignore_routes", "_ignore_uri_patterns")

    def __init__(
        self,
        ignore_routes: Iterable[str] = (),
        ignore_route_patterns: Iterable[str | re.Pattern[str]] = (),
        ignore_uri_patterns: Iterable[str | re.Pattern[str]] = (),
    ) -> None:
        self._ignore_routes = frozenset(ignore_routes)
        self._ignore_route_patterns = _compile(ignore_route_patterns, "route")
        self._ignore_uri_patterns = _compile(ignore_uri_patterns, "uri")

    @classmethod
    def from_config(cls, config: CmsConfig) -> DecorationStrategy:
        """Build a strategy from the decoration fields of *config*."""
        return cls(
            ignore_routes=config.ignore_routes,
            ignore_route_patterns=config.ignore_route_patterns,
            ignore_uri_patterns=config.ignore_uri_patterns,
        )

    def is_decorable(self, request: Request, request_kind: RequestKind, response: Response) -> bool:
        """True if *response* to *request* may receive the site layout.

        Checks, in order, stopping at the first failure:

        1. *request_kind* is the top-level request
        2. the response is HTML (no Content-Type counts as HTML)
        3. the status is exactly 200
        4. the request is not an XHR or htmx fragment request
        5. the response did not opt out via ``x-sonata-page-decorable``
        6. the route name and path are not ignored
        """
        if request_kind is not RequestKind.MAIN:
            logger.debug("Not decorating %s: sub-request", request.path)
            return False

        media_type = response.media_type
        if media_type is not None and media_type != "text/html":
            logger.debug("Not decorating %s: content type %s", request.path, media_type)
            return False

        if response.status != 200:
            logger.debug("Not decorating %s: status %d", request.path, response.status)
            return False

        if request.is_xhr or request.is_fragment:
            logger.debug("Not decorating %s: async request", request.path)
            return False

        opt_out = response.header(DECORABLE_HEADER)
        if opt_out is not None and opt_out.strip().lower() in _OPT_OUT_VALUES:
            logger.debug("Not decorating %s: response opted out", request.path)
            return False

        return self.is_request_decorable(request)

    def is_request_decorable(self, request: Request) -> bool:
        """True if neither the route name nor the path is ignored."""
        return self.is_route_name_decorable(request.route_name) and self.is_route_uri_decorable(
            request.path
        )

    def is_route_name_decorable(self, route_name: str | None) -> bool:
        """True for a non-empty route name that no ignore rule matches."""
        if not route_name:
            return False

        if route_name in self._ignore_routes:
            return False

        return not any(pattern.search(route_name) for pattern in self._ignore_route_patterns)

    def is_route_uri_decorable(self, uri: str) -> bool:
        """True if no ignore pattern matches *uri*."""
        return not any(pattern.search(uri) for pattern in self._ignore_uri_patterns)
