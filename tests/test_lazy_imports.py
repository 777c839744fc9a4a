"""Tests for wren.__init__ — every public name resolves lazily."""

import pytest

import wren


@pytest.mark.parametrize("name", wren.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    assert getattr(wren, name) is not None


def test_names_match_modules() -> None:
    from wren.cms.resolver import PageResolver
    from wren.errors import PageNotFound

    assert wren.PageResolver is PageResolver
    assert wren.PageNotFound is PageNotFound


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        wren.__getattr__("ThisDoesNotExist")
