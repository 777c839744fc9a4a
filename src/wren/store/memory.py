"""In-memory page and block stores.

Dict-backed, sequential ids, no persistence. Useful for tests, fixtures,
and small sites whose page tree is built in code.

Each store counts the lookups it answers (``queries``) so callers can
check how often the resolver reached storage.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from wren.errors import InvalidArgument
from wren.models import CONTAINER_TYPE, Block, Page, Site

_PAGE_FIELDS = frozenset({"id", "url", "route_name", "name"})


class MemoryPageStore:
    """Pages held in a dict keyed by id."""

    __slots__ = ("_next_id", "_pages", "queries", "saved")

    def __init__(self) -> None:
        self._pages: dict[int, Page] = {}
        self._next_id = 1
        self.queries = 0
        self.saved = 0

    def add(self, page: Page, *, site: Site | None = None) -> Page:
        """Register an existing page, assigning an id when needed."""
        if site is not None:
            page.site = site
        if page.id is None:
            page.id = self._next_id
        self._next_id = max(self._next_id, page.id + 1)
        self._pages[page.id] = page
        return page

    def all(self) -> list[Page]:
        """Every stored page, in id order."""
        return [self._pages[page_id] for page_id in sorted(self._pages)]

    async def find_one(self, criteria: Mapping[str, Any]) -> Page | None:
        self.queries += 1
        for page in self.all():
            if _matches(page, criteria):
                return page
        return None

    def create(self, **attributes: Any) -> Page:
        return Page(**attributes)

    async def save(self, page: Page) -> None:
        self.saved += 1
        self.add(page)


class MemoryBlockStore:
    """Blocks held in a dict keyed by id.

    Blocks are attached to their page on ``add`` so page aggregates stay in
    sync with the store.
    """

    __slots__ = ("_blocks", "_next_id", "container_setting", "created", "queries")

    def __init__(self, *, container_setting: str = "name") -> None:
        self._blocks: dict[int, Block] = {}
        self._next_id = 1
        self.container_setting = container_setting
        self.queries = 0
        self.created = 0

    def add(self, block: Block) -> Block:
        """Register a block and attach it to its page."""
        if block.id is None:
            block.id = self._next_id
        self._next_id = max(self._next_id, block.id + 1)
        self._blocks[block.id] = block
        if block.page is not None and block.parent is None and block not in block.page.blocks:
            block.page.blocks.append(block)
        return block

    async def load_page_blocks(self, page: Page) -> Sequence[Block]:
        self.queries += 1
        blocks = [block for block in self._blocks.values() if block.page is page]
        return sorted(blocks, key=lambda block: (block.position, block.id))

    async def get_block(self, block_id: int) -> Block | None:
        self.queries += 1
        return self._blocks.get(block_id)

    async def create_new_container(
        self,
        *,
        enabled: bool,
        page: Page,
        name: str,
        position: int,
        parent: Block | None,
    ) -> Block:
        self.created += 1
        return self.add(
            Block(
                page=page,
                parent=parent,
                settings={self.container_setting: name},
                enabled=enabled,
                position=position,
                type=CONTAINER_TYPE,
            )
        )


def _matches(page: Page, criteria: Mapping[str, Any]) -> bool:
    for key, value in criteria.items():
        if key == "site":
            if page.site is None or page.site.id != value:
                return False
        elif key in _PAGE_FIELDS:
            if getattr(page, key) != value:
                return False
        else:
            msg = f"Unknown page criterion: {key!r}"
            raise InvalidArgument(msg)
    return True
