"""Install a fresh PageResolver for every request.

The resolver's caches must not outlive the request, so this middleware
builds one per request and exposes it through ``wren.context``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wren.cms.resolver import PageResolver
from wren.config import CmsConfig
from wren.context import resolver_scope
from wren.errors import PageNotFound

if TYPE_CHECKING:
    from wren.http.request import Request
    from wren.http.response import Response
    from wren.middleware.protocol import Next
    from wren.models import Site
    from wren.store.protocol import BlockStore, PageStore


class PageResolverMiddleware:
    """Scope a ``PageResolver`` to each request.

    When *site* is given, the page published at the request path becomes
    the resolver's current page. A path with no page leaves it unset;
    the handler decides what to render.

    Usage::

        middleware = [
            PageResolverMiddleware(pages, blocks, site=site),
            DecorationMiddleware(strategy, Layout(LAYOUT_HTML)),
        ]
        handler = chain(dispatch, middleware)

        # In a handler
        page = get_resolver().current_page
    """

    __slots__ = ("_block_store", "_config", "_page_store", "_site")

    def __init__(
        self,
        page_store: PageStore,
        block_store: BlockStore,
        *,
        site: Site | None = None,
        config: CmsConfig | None = None,
    ) -> None:
        self._page_store = page_store
        self._block_store = block_store
        self._site = site
        self._config = config or CmsConfig()

    async def __call__(self, request: Request, next: Next) -> Response:
        resolver = PageResolver(self._page_store, self._block_store, self._config)
        with resolver_scope(resolver):
            if self._site is not None:
                try:
                    resolver.current_page = await resolver.resolve_by_url(self._site, request.path)
                except PageNotFound:
                    pass
            return await next(request)
