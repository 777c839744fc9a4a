"""Request-scoped resolver via ContextVar.

Provides:
- ``resolver_var``: The ``PageResolver`` for the current request.
- ``resolver_scope``: Install a resolver for the duration of a block.

Caches live on the resolver, so scoping the resolver per request keeps
concurrent requests (and tests) isolated. No process-wide singleton.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    threads. No locks needed.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.cms.resolver import PageResolver

resolver_var: ContextVar[PageResolver] = ContextVar("wren_resolver")
"""The current resolver. Set by ``PageResolverMiddleware`` before dispatch."""


def get_resolver() -> PageResolver:
    """Return the resolver for the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return resolver_var.get()


@contextmanager
def resolver_scope(resolver: PageResolver) -> Iterator[PageResolver]:
    """Make *resolver* the current one until the block exits.

    Usage::

        with resolver_scope(PageResolver(pages, blocks)) as resolver:
            page = await resolver.resolve_by_url(site, "/about")
    """
    token = resolver_var.set(resolver)
    try:
        yield resolver
    finally:
        resolver_var.reset(token)
