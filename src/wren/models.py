"""CMS data model: sites, pages, and blocks.

Pages and blocks form a graph (a block points at its page, a page lists its
blocks), so both use identity equality and keep back-references out of
``repr``. Unlike the request/response facades these objects are mutable:
stores assign ids on save and attach newly created blocks to their page.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

CONTAINER_TYPE = "wren.container"
"""Block type assigned to lazily created container blocks."""


@dataclass(slots=True, eq=False)
class Site:
    """A site scopes page locators. Opaque to the core beyond its id."""

    id: int | None = None
    name: str = ""


@dataclass(slots=True, eq=False)
class Block:
    """A content fragment attached to a page.

    A block acts as a container when its name setting matches a structural
    slot requested by a template.

    Attributes:
        id: Store-assigned identity (``None`` until persisted).
        page: The owning page.
        parent: Optional parent block for nested blocks.
        settings: String-keyed settings; containers carry ``name`` (or
            ``code`` in migrated deployments).
        enabled: Disabled blocks are still found, rendering decides.
        position: Sort order among siblings.
        type: Block type identifier.
    """

    id: int | None = None
    page: Page | None = field(default=None, repr=False)
    parent: Block | None = field(default=None, repr=False)
    settings: dict[str, Any] = field(default_factory=dict)
    enabled: bool = True
    position: int = 0
    type: str = ""

    def setting(self, key: str, default: Any = None) -> Any:
        """Return a single setting, or *default* when unset."""
        return self.settings.get(key, default)


@dataclass(slots=True, eq=False)
class Page:
    """A page aggregate: locators, ancestor chain, and attached blocks.

    ``parents`` is ordered nearest first: ``parents[0]`` is the direct
    parent and ``parents[-1]`` the most distant ancestor.  The list is flat,
    so traversal never chases parent pointers.

    Attributes:
        id: Store-assigned identity (``None`` until saved).
        url: Public URL path, e.g. ``/about``.
        route_name: Application route backed by this page.
        name: Internal (display) name.
        site: The owning site.
        parents: Ancestors, nearest first.
        blocks: Blocks directly attached to this page, in attachment order.
        decorate: Whether responses for this page may receive site chrome.
        enabled: Disabled pages are still resolvable, rendering decides.
    """

    id: int | None = None
    url: str | None = None
    route_name: str | None = None
    name: str | None = None
    site: Site | None = field(default=None, repr=False)
    parents: list[Page] = field(default_factory=list, repr=False)
    blocks: list[Block] = field(default_factory=list, repr=False)
    decorate: bool = True
    enabled: bool = True

    @property
    def root(self) -> Page:
        """The most distant ancestor, or this page when it has none."""
        if self.parents:
            return self.parents[-1]
        return self

    @property
    def parent(self) -> Page | None:
        """The direct parent, or ``None`` for a root page."""
        if self.parents:
            return self.parents[0]
        return None
