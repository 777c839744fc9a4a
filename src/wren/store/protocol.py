"""Store protocols — what the resolver needs from persistence.

Any object with the right shape works; no base class required. The
framework checks the shape, not the lineage.

Reads and writes are coroutines: store calls are the only places the
core suspends. ``PageStore.create`` only builds an unsaved object, so it
stays synchronous.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from wren.models import Block, Page


class PageStore(Protocol):
    """Finds, builds, and persists pages."""

    async def find_one(self, criteria: Mapping[str, Any]) -> Page | None:
        """Return the single page matching every criterion, or ``None``.

        Criteria keys are page field names (``id``, ``url``,
        ``route_name``, ``name``) plus ``site`` holding a site id.
        """
        ...

    def create(self, **attributes: Any) -> Page:
        """Build a new, unsaved page."""
        ...

    async def save(self, page: Page) -> None:
        """Persist *page*, assigning an id when it has none."""
        ...


class BlockStore(Protocol):
    """Loads blocks and creates containers."""

    async def load_page_blocks(self, page: Page) -> Sequence[Block]:
        """Return every block nested under *page*, in position order."""
        ...

    async def get_block(self, block_id: int) -> Block | None:
        """Return a single block, or ``None``."""
        ...

    async def create_new_container(
        self,
        *,
        enabled: bool,
        page: Page,
        name: str,
        position: int,
        parent: Block | None,
    ) -> Block:
        """Create, persist, and attach a container block to *page*."""
        ...
