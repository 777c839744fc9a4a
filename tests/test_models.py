"""Tests for the page and block model."""

from wren.models import Block, Page, Site


class TestPage:
    def test_root_without_parents(self) -> None:
        page = Page(id=1)
        assert page.root is page
        assert page.parent is None

    def test_root_and_parent(self) -> None:
        root = Page(id=1)
        section = Page(id=2, parents=[root])
        leaf = Page(id=3, parents=[section, root])
        assert leaf.root is root
        assert leaf.parent is section

    def test_identity_equality(self) -> None:
        assert Page(id=1, url="/") != Page(id=1, url="/")

    def test_repr_skips_back_references(self) -> None:
        page = Page(id=1, url="/", site=Site(id=1))
        page.blocks.append(Block(id=1, page=page))
        assert "blocks" not in repr(page)
        assert "site" not in repr(page)


class TestBlock:
    def test_setting(self) -> None:
        block = Block(settings={"name": "header"})
        assert block.setting("name") == "header"
        assert block.setting("code") is None
        assert block.setting("code", "fallback") == "fallback"

    def test_defaults(self) -> None:
        block = Block()
        assert block.enabled is True
        assert block.position == 0
        assert block.settings == {}

    def test_repr_skips_page(self) -> None:
        page = Page(id=1)
        block = Block(id=2, page=page)
        assert "page=" not in repr(block)
