"""Decoration middleware — wrap eligible responses in the site layout.

Eligibility comes from ``DecorationStrategy``; the wrapping itself is any
callable taking ``(request, response)`` and returning a new response. A
string-substitution ``Layout`` covers the common case without pulling in a
template engine.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from wren._internal.invoke import invoke
from wren.context import resolver_var
from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from wren.cms.decoration import DecorationStrategy
    from wren.http.request import Request
    from wren.http.response import Response
    from wren.middleware.protocol import Next

type Decorator = Callable[[Request, Response], Response | Awaitable[Response]]


class Layout:
    """Substitute the response body into a layout string.

    Usage::

        layout = Layout(
            "<html><body><header>Site</header>{{ content }}</body></html>"
        )
    """

    __slots__ = ("_placeholder", "_template")

    def __init__(self, template: str, *, placeholder: str = "{{ content }}") -> None:
        if placeholder not in template:
            msg = f"Layout template has no {placeholder!r} placeholder"
            raise ConfigurationError(msg)
        self._template = template
        self._placeholder = placeholder

    def __call__(self, request: Request, response: Response) -> Response:
        return response.with_body(self._template.replace(self._placeholder, response.text, 1))


class DecorationMiddleware:
    """Apply *decorate* to every response the strategy deems decorable.

    When a resolver is active for the request and its current page has
    ``decorate=False`` (internal pages, for instance), the response passes
    through untouched. Ineligible responses are returned unchanged, never
    turned into errors.
    """

    __slots__ = ("_decorate", "_strategy")

    def __init__(self, strategy: DecorationStrategy, decorate: Decorator) -> None:
        self._strategy = strategy
        self._decorate = decorate

    async def __call__(self, request: Request, next: Next) -> Response:
        response = await next(request)

        if not self._strategy.is_decorable(request, request.kind, response):
            return response

        resolver = resolver_var.get(None)
        if resolver is not None:
            page = resolver.current_page
            if page is not None and not page.decorate:
                return response

        return await invoke(self._decorate, request, response)
