"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    PageResolverMiddleware -- One PageResolver per request, current page from the path
    DecorationMiddleware -- Wrap decorable responses in the site layout
"""

from wren.middleware.decoration import DecorationMiddleware, Layout
from wren.middleware.protocol import Middleware, Next, chain
from wren.middleware.resolver import PageResolverMiddleware

__all__ = [
    "DecorationMiddleware",
    "Layout",
    "Middleware",
    "Next",
    "PageResolverMiddleware",
    "chain",
]
