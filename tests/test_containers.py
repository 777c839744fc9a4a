"""Tests for ContainerLocator — hierarchical lookup and lazy creation."""

from wren.cms.containers import ContainerLocator
from wren.models import CONTAINER_TYPE, Block, Page
from wren.store.memory import MemoryBlockStore


def _tree() -> tuple[Page, Page, Page]:
    """root -> section -> leaf, with ancestors nearest first."""
    root = Page(id=1, url="/")
    section = Page(id=2, url="/docs", parents=[root])
    leaf = Page(id=3, url="/docs/intro", parents=[section, root])
    return root, section, leaf


def _named(blocks: MemoryBlockStore, page: Page, name: str, **kwargs: object) -> Block:
    return blocks.add(Block(page=page, settings={"name": name}, **kwargs))


class TestFindContainer:
    def test_on_page_itself(self, blocks: MemoryBlockStore) -> None:
        _, _, leaf = _tree()
        block = _named(blocks, leaf, "content")
        assert ContainerLocator(blocks).find_container("content", leaf) is block

    def test_nearest_ancestor_wins(self, blocks: MemoryBlockStore) -> None:
        root, section, leaf = _tree()
        _named(blocks, root, "header")
        nearer = _named(blocks, section, "header")
        assert ContainerLocator(blocks).find_container("header", leaf) is nearer

    def test_page_beats_ancestors(self, blocks: MemoryBlockStore) -> None:
        root, _, leaf = _tree()
        _named(blocks, root, "header")
        own = _named(blocks, leaf, "header")
        assert ContainerLocator(blocks).find_container("header", leaf) is own

    def test_found_on_root(self, blocks: MemoryBlockStore) -> None:
        root, _, leaf = _tree()
        header = _named(blocks, root, "header")
        assert ContainerLocator(blocks).find_container("header", leaf) is header

    def test_first_match_in_attachment_order(self, blocks: MemoryBlockStore) -> None:
        _, _, leaf = _tree()
        first = _named(blocks, leaf, "footer")
        _named(blocks, leaf, "footer")
        assert ContainerLocator(blocks).find_container("footer", leaf) is first

    def test_missing(self, blocks: MemoryBlockStore) -> None:
        _, _, leaf = _tree()
        _named(blocks, leaf, "content")
        assert ContainerLocator(blocks).find_container("sidebar", leaf) is None

    def test_disabled_blocks_are_found(self, blocks: MemoryBlockStore) -> None:
        _, _, leaf = _tree()
        block = _named(blocks, leaf, "content", enabled=False)
        assert ContainerLocator(blocks).find_container("content", leaf) is block

    def test_explicit_parent_returned(self, blocks: MemoryBlockStore) -> None:
        _, _, leaf = _tree()
        _named(blocks, leaf, "content")
        parent = Block(id=99, settings={"name": "other"})
        found = ContainerLocator(blocks).find_container("content", leaf, parent)
        assert found is parent

    def test_custom_setting(self) -> None:
        blocks = MemoryBlockStore(container_setting="code")
        page = Page(id=1)
        block = blocks.add(Block(page=page, settings={"code": "content"}))
        blocks.add(Block(page=page, settings={"name": "sidebar"}))

        locator = ContainerLocator(blocks, setting="code")
        assert locator.find_container("content", page) is block
        assert locator.find_container("sidebar", page) is None

    def test_repeated_ancestor_visited_once(self, blocks: MemoryBlockStore) -> None:
        root = Page(id=1)
        leaf = Page(id=2, parents=[root, root])
        assert ContainerLocator(blocks).find_container("header", leaf) is None


class TestFindOrCreateContainer:
    async def test_existing_not_recreated(self, blocks: MemoryBlockStore) -> None:
        root, _, leaf = _tree()
        header = _named(blocks, root, "header")
        found = await ContainerLocator(blocks).find_or_create_container("header", leaf)
        assert found is header
        assert blocks.created == 0

    async def test_created_on_root(self, blocks: MemoryBlockStore) -> None:
        root, _, leaf = _tree()
        created = await ContainerLocator(blocks).find_or_create_container("header", leaf)

        assert created.page is root
        assert created.parent is None
        assert created.enabled is True
        assert created.position == 1
        assert created.type == CONTAINER_TYPE
        assert created.setting("name") == "header"
        assert created in root.blocks
        assert blocks.created == 1

    async def test_created_on_page_without_parents(self, blocks: MemoryBlockStore) -> None:
        page = Page(id=5)
        created = await ContainerLocator(blocks).find_or_create_container("content", page)
        assert created.page is page

    async def test_second_call_finds_created(self, blocks: MemoryBlockStore) -> None:
        _, section, leaf = _tree()
        locator = ContainerLocator(blocks)
        first = await locator.find_or_create_container("header", leaf)
        second = await locator.find_or_create_container("header", section)
        assert first is second
        assert blocks.created == 1

    async def test_explicit_parent_skips_creation(self, blocks: MemoryBlockStore) -> None:
        _, _, leaf = _tree()
        parent = Block(id=99)
        found = await ContainerLocator(blocks).find_or_create_container("x", leaf, parent)
        assert found is parent
        assert blocks.created == 0

    async def test_configured_position(self, blocks: MemoryBlockStore) -> None:
        page = Page(id=1)
        created = await ContainerLocator(blocks, position=10).find_or_create_container("a", page)
        assert created.position == 10
