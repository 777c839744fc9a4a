"""Shared pytest fixtures for wren tests.

Every test gets fresh in-memory stores and a fresh resolver, so caches
never leak between tests.
"""

import pytest

from wren.cms.resolver import PageResolver
from wren.models import Site
from wren.store.memory import MemoryBlockStore, MemoryPageStore


@pytest.fixture
def site() -> Site:
    return Site(id=1, name="main")


@pytest.fixture
def pages() -> MemoryPageStore:
    return MemoryPageStore()


@pytest.fixture
def blocks() -> MemoryBlockStore:
    return MemoryBlockStore()


@pytest.fixture
def resolver(pages: MemoryPageStore, blocks: MemoryBlockStore) -> PageResolver:
    return PageResolver(pages, blocks)

