"""Page resolution with per-request memoization.

``PageResolver`` answers "which page is this?" for a URL path, a route
name, an internal name, or an id, and keeps what it found for the rest of
the request:

- ``_references`` maps field -> value -> page id, so a second lookup by
  the same url or route name skips the store;
- ``_pages`` maps page id -> page;
- ``_blocks`` maps block id -> block, filled whenever a page is resolved
  (every block of the page is loaded eagerly).

A miss is never memoized: a locator that was not found is looked up again
next time, so a page created mid-request becomes visible. A lookup that
overlaps another one for the same id queries the store too.

``_identity`` holds one instance per page id. Pages and ancestors a store
returns as fresh copies are swapped for the instance already known, so
sibling pages share their root and its containers.

One resolver serves one request. Its caches are plain dicts with no
locking; install a fresh resolver per request (``PageResolverMiddleware``
does) rather than sharing one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Final

from wren.cms.containers import ContainerLocator
from wren.cms.locators import ById, ByPath, ByRoute, Current, Locator, parse_locator
from wren.config import CmsConfig
from wren.errors import InvalidArgument, PageNotFound

if TYPE_CHECKING:
    from wren.models import Block, Page, Site
    from wren.store.protocol import BlockStore, PageStore

logger = logging.getLogger("wren.cms")

LOOKUP_FIELDS: Final = frozenset({"id", "url", "route_name", "name"})


class _Unresolved:
    """Marks a page id whose lookup is in flight."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<unresolved>"


_UNRESOLVED: Final = _Unresolved()


class PageResolver:
    """Resolve pages by locator and memoize the results for one request.

    Usage::

        resolver = PageResolver(page_store, block_store)
        page = await resolver.resolve_by_url(site, "/about")
        header = await resolver.find_or_create_container("header", page)
    """

    __slots__ = (
        "_block_store",
        "_blocks",
        "_config",
        "_current_page",
        "_identity",
        "_page_store",
        "_pages",
        "_references",
        "containers",
    )

    def __init__(
        self,
        page_store: PageStore,
        block_store: BlockStore,
        config: CmsConfig | None = None,
    ) -> None:
        self._page_store = page_store
        self._block_store = block_store
        self._config = config or CmsConfig()
        self._current_page: Page | None = None
        self._pages: dict[Any, Page | _Unresolved] = {}
        self._references: dict[str, dict[Any, Any]] = {}
        self._blocks: dict[Any, Block] = {}
        self._identity: dict[Any, Page] = {}
        self.containers = ContainerLocator(
            block_store,
            setting=self._config.container_setting,
            position=self._config.container_position,
        )

    # -- Current page --

    @property
    def current_page(self) -> Page | None:
        """The page active for this request, if one was set."""
        return self._current_page

    @current_page.setter
    def current_page(self, page: Page | None) -> None:
        self._current_page = page

    # -- Lookups --

    async def resolve_by_url(self, site: Site, url: str) -> Page:
        """Resolve the page published at *url* on *site*."""
        return await self.resolve_by(site, "url", url)

    async def resolve_by_route_name(self, site: Site, route_name: str) -> Page:
        """Resolve the page backing the application route *route_name*."""
        return await self.resolve_by(site, "route_name", route_name)

    async def resolve_by_name(self, site: Site, name: str) -> Page:
        """Resolve a page by its internal name."""
        return await self.resolve_by(site, "name", name)

    async def resolve_by_id(self, page_id: Any) -> Page:
        """Resolve a page by id, regardless of site."""
        return await self.resolve_by(None, "id", page_id)

    async def resolve_by(self, site: Site | None, field: str, value: Any) -> Page:
        """Resolve a page where *field* equals *value*, scoped to *site* if given.

        Served from cache when this resolver has already seen the same id
        or the same field/value pair. Otherwise queries the page store,
        loads the page's blocks, and caches both.

        Raises:
            PageNotFound: No stored page matches.
            InvalidArgument: *field* is not a lookup field.
        """
        if field not in LOOKUP_FIELDS:
            msg = f"Cannot look up pages by {field!r}"
            raise InvalidArgument(msg)

        if field == "id":
            page_id = value
        else:
            page_id = self._references.get(field, {}).get(value)

        cached = self._pages.get(page_id) if page_id is not None else None
        if cached is not None and cached is not _UNRESOLVED:
            return cached  # type: ignore[return-value]

        # An overlapping or reentrant lookup of an id still in flight queries
        # the store as well; it never reports a stored page as missing.
        marked = page_id is not None and cached is None
        if marked:
            self._pages[page_id] = _UNRESOLVED

        criteria: dict[str, Any] = {field: value}
        if site is not None:
            criteria["site"] = site.id

        try:
            page = await self._page_store.find_one(criteria)
        finally:
            if marked and self._pages.get(page_id) is _UNRESOLVED:
                del self._pages[page_id]

        if page is None:
            logger.debug("No page for %s = %r (site %r)", field, value, criteria.get("site"))
            msg = f"Unable to find the page : {field} = {value}"
            raise PageNotFound(msg)

        page = self._adopt(page)
        if self._pages.get(page.id) is not page:
            await self._load_blocks(page)
        self._remember(page, field, value)
        return page

    async def resolve(self, site: Site, locator: Locator | str | int | None) -> Page:
        """Resolve any kind of locator.

        Raw values are classified by ``parse_locator``: ``"/path"`` is a
        URL, ``"name"`` a route name, ``42`` an id, and a falsy value the
        current page.

        Raises:
            PageNotFound: Nothing matches, or the current page is unset.
            InvalidArgument: *locator* has an unsupported type.
        """
        match parse_locator(locator):
            case ByPath(url=url):
                return await self.resolve_by_url(site, url)
            case ByRoute(route_name=route_name):
                return await self.resolve_by_route_name(site, route_name)
            case ById(page_id=page_id):
                return await self.resolve_by_id(page_id)
            case Current():
                if self._current_page is None:
                    msg = "Unable to retrieve the page"
                    raise PageNotFound(msg)
                return self._current_page

    async def resolve_internal_route(self, site: Site, name: str) -> Page:
        """Return the internal page backing *name*, creating it on first use.

        Internal pages back application routes that have no author-facing
        URL. They are never decorated.

        Raises:
            InvalidArgument: *name* starts with the reserved prefix, since
                internal pages may not shadow error handling routes.
        """
        if name.startswith(self._config.reserved_route_prefix):
            msg = (
                f"Illegal internal route name : {name}, an internal page cannot "
                f"start with `{self._config.reserved_route_prefix}`"
            )
            raise InvalidArgument(msg)

        route_name = f"{self._config.internal_route_prefix}{name}"

        try:
            return await self.resolve_by_route_name(site, route_name)
        except PageNotFound:
            pass

        page = self._page_store.create(
            url=None,
            route_name=route_name,
            name=f"Internal Page: {name}",
            decorate=False,
        )
        page.site = site
        await self._page_store.save(page)
        page = self._adopt(page)
        logger.info("Created internal page %r for site %r", route_name, site.id)

        self._remember(page, "route_name", route_name)
        return page

    # -- Blocks --

    async def get_block(self, block_id: Any) -> Block | None:
        """Return a block by id, from cache when possible.

        A block the store does not know is reported as ``None`` and not
        cached.
        """
        block = self._blocks.get(block_id)
        if block is None:
            block = await self._block_store.get_block(block_id)
            if block is not None:
                self._blocks[block_id] = block
        return block

    def loaded_blocks(self) -> tuple[Block, ...]:
        """Every block this resolver has materialized so far."""
        return tuple(self._blocks.values())

    def find_container(
        self,
        name: str,
        page: Page,
        parent_container: Block | None = None,
    ) -> Block | None:
        """Find a container on *page* or its ancestors. See ``ContainerLocator``."""
        return self.containers.find_container(name, page, parent_container)

    async def find_or_create_container(
        self,
        name: str,
        page: Page,
        parent_container: Block | None = None,
    ) -> Block:
        """Find a container, lazily creating it on the root page when absent."""
        container = await self.containers.find_or_create_container(name, page, parent_container)
        if container.id is not None:
            self._blocks.setdefault(container.id, container)
        return container

    # -- Internals --

    async def _load_blocks(self, page: Page) -> None:
        """Load every block nested under *page* into the block cache."""
        blocks: Sequence[Block] = await self._block_store.load_page_blocks(page)
        for block in blocks:
            self._blocks[block.id] = block

    def _adopt(self, page: Page) -> Page:
        """Return this request's instance of *page*, registering it if new.

        Stores may return fresh copies of pages already loaded in this
        request, typically a shared ancestor. Keeping a single instance per
        id means a container created on an ancestor is visible from every
        descendant resolved afterwards.
        """
        if page.id is None:
            return page
        known = self._identity.get(page.id)
        if known is not None:
            return known
        self._identity[page.id] = page

        chain = [self._canonical(parent) for parent in page.parents]
        for index, parent in enumerate(chain):
            if parent is page.parents[index]:
                # First sighting: point its own ancestors at known instances too
                parent.parents = [self._canonical(p) for p in parent.parents]
        page.parents = chain
        return page

    def _canonical(self, page: Page) -> Page:
        if page.id is None:
            return page
        return self._identity.setdefault(page.id, page)

    def _remember(self, page: Page, field: str, value: Any) -> None:
        if field != "id":
            self._references.setdefault(field, {})[value] = page.id
        self._pages[page.id] = page
