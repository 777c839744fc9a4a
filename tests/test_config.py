"""Tests for CmsConfig."""

import dataclasses

import pytest

from wren.config import CmsConfig
from wren.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self) -> None:
        config = CmsConfig()
        assert config.ignore_routes == ()
        assert config.internal_route_prefix == "_page_internal_"
        assert config.reserved_route_prefix == "error"
        assert config.container_setting == "name"
        assert config.container_position == 1
        assert config.database_url == "sqlite:///:memory:"
        assert config.echo is False

    def test_frozen(self) -> None:
        config = CmsConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.echo = True  # type: ignore[misc]


class TestFromMapping:
    def test_lists_become_tuples(self) -> None:
        config = CmsConfig.from_mapping(
            {"ignore_routes": ["login", "logout"], "ignore_uri_patterns": [r"^/admin"]}
        )
        assert config.ignore_routes == ("login", "logout")
        assert config.ignore_uri_patterns == (r"^/admin",)
        hash(config)

    def test_scalars_pass_through(self) -> None:
        config = CmsConfig.from_mapping({"container_setting": "code", "container_position": 5})
        assert config.container_setting == "code"
        assert config.container_position == 5

    def test_empty_mapping(self) -> None:
        assert CmsConfig.from_mapping({}) == CmsConfig()

    def test_unknown_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="ignore_route, typo"):
            CmsConfig.from_mapping({"typo": 1, "ignore_route": ["x"]})
