"""Middleware protocol, Next type alias, and chain helper.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The framework checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from wren.http.request import Request
from wren.http.response import Response

# The next handler in the middleware chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class PageResolverMiddleware:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


def chain(handler: Next, middleware: Sequence[Callable[..., Any]]) -> Next:
    """Wrap *handler* so *middleware* run outermost-first.

    ``chain(h, [a, b])`` calls ``a``, which calls ``b``, which calls ``h``.
    """
    wrapped = handler
    for mw in reversed(middleware):
        outer = wrapped
        mw_ref = mw

        async def make_next(req: Request, _mw: Any = mw_ref, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        wrapped = make_next

    return wrapped
