"""Page and block stores.

The resolver talks to storage through two protocols, ``PageStore`` and
``BlockStore``. Two implementations ship:

    MemoryPageStore / MemoryBlockStore -- dict-backed, for tests and code-built sites
    SQLPageStore / SQLBlockStore -- SQLite via ``wren.data.Database``
"""

from wren.store.memory import MemoryBlockStore, MemoryPageStore
from wren.store.protocol import BlockStore, PageStore
from wren.store.sql import SQLBlockStore, SQLPageStore, create_schema

__all__ = [
    "BlockStore",
    "MemoryBlockStore",
    "MemoryPageStore",
    "PageStore",
    "SQLBlockStore",
    "SQLPageStore",
    "create_schema",
]
