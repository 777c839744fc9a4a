"""Tests for parse_locator."""

import pytest

from wren.cms.locators import ById, ByPath, ByRoute, Current, parse_locator
from wren.errors import InvalidArgument


class TestParseLocator:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("/about", ByPath("/about")),
            ("/", ByPath("/")),
            ("about", ByRoute("about")),
            ("_page_internal_home", ByRoute("_page_internal_home")),
            (42, ById(42)),
            (0, ById(0)),
            (None, Current()),
            ("", Current()),
            (False, Current()),
        ],
    )
    def test_classification(self, value: object, expected: object) -> None:
        assert parse_locator(value) == expected

    def test_locators_pass_through(self) -> None:
        locator = ByRoute("home")
        assert parse_locator(locator) is locator

    @pytest.mark.parametrize("value", [4.2, True, ["/about"], object()])
    def test_unsupported(self, value: object) -> None:
        with pytest.raises(InvalidArgument):
            parse_locator(value)
