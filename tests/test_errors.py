"""Tests for wren.errors — exception hierarchy and messages."""

import pytest

from wren.errors import (
    ConfigurationError,
    HTTPError,
    InvalidArgument,
    NotFound,
    PageNotFound,
    WrenError,
)


class TestHierarchy:
    def test_http_error_is_wren_error(self) -> None:
        assert issubclass(HTTPError, WrenError)

    def test_page_not_found_is_not_found(self) -> None:
        assert issubclass(PageNotFound, NotFound)

    def test_invalid_argument_is_value_error(self) -> None:
        assert issubclass(InvalidArgument, WrenError)
        assert issubclass(InvalidArgument, ValueError)

    def test_configuration_error_is_wren_error(self) -> None:
        assert issubclass(ConfigurationError, WrenError)


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad locator")) == "400: Bad locator"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]


class TestPageNotFound:
    def test_default_detail(self) -> None:
        err = PageNotFound()
        assert err.status == 404
        assert err.detail == "Unable to retrieve the page"

    def test_custom_detail(self) -> None:
        err = PageNotFound("Unable to find the page : url = /x")
        assert str(err) == "404: Unable to find the page : url = /x"

    def test_caught_as_not_found(self) -> None:
        with pytest.raises(NotFound):
            raise PageNotFound
