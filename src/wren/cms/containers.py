"""Container lookup across a page hierarchy, with lazy creation.

Containers are named block slots requested by templates. Lookup walks the
page first, then its ancestors nearest first, so a container defined on a
layout page is visible from every descendant. Creation goes the other way:
a missing container is attached to the most distant ancestor, where shared
layout blocks belong.

Creation does not re-check for a duplicate created concurrently by another
request. Two requests that miss at the same time both create; later reads
take the first match, so the duplicate is harmless but persists.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.models import Block, Page
    from wren.store.protocol import BlockStore

logger = logging.getLogger("wren.cms")


class ContainerLocator:
    """Find or lazily create named container blocks.

    Stateless between calls; whatever caching exists lives on the
    ``PageResolver`` that owns this locator.
    """

    __slots__ = ("_block_store", "_position", "_setting")

    def __init__(
        self,
        block_store: BlockStore,
        *,
        setting: str = "name",
        position: int = 1,
    ) -> None:
        self._block_store = block_store
        self._setting = setting
        self._position = position

    def find_container(
        self,
        name: str,
        page: Page,
        parent_container: Block | None = None,
    ) -> Block | None:
        """Return the container called *name* visible from *page*, or ``None``.

        An explicit *parent_container* is returned as-is: the caller already
        holds the block to render into.
        """
        if parent_container is not None:
            return parent_container

        seen: set[int] = set()
        for candidate in (page, *page.parents):
            # A malformed ancestor list may repeat a page; visit each once.
            if id(candidate) in seen:
                continue
            seen.add(id(candidate))
            block = self._find_block_by_name(name, candidate)
            if block is not None:
                return block
        return None

    async def find_or_create_container(
        self,
        name: str,
        page: Page,
        parent_container: Block | None = None,
    ) -> Block:
        """Return the container called *name*, creating it when absent.

        New containers are enabled, sit at the configured position, and
        attach to ``page.root``: the most distant ancestor, or *page*
        itself when it has no ancestors.
        """
        container = self.find_container(name, page, parent_container)
        if container is not None:
            return container

        target = page.root
        container = await self._block_store.create_new_container(
            enabled=True,
            page=target,
            name=name,
            position=self._position,
            parent=None,
        )
        logger.info("Created container %r on page %r", name, target.id)
        return container

    def _find_block_by_name(self, name: str, page: Page) -> Block | None:
        """First block directly attached to *page* whose name setting is *name*."""
        for block in page.blocks:
            if block.setting(self._setting) == name:
                return block
        return None
