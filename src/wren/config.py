"""CMS configuration.

CmsConfig is a frozen dataclass, immutable after creation and read by
attribute rather than by string key.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CmsConfig:
    """CMS configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = CmsConfig(
            ignore_routes=("login",),
            ignore_uri_patterns=(r"^/admin",),
        )
    """

    # Decoration: requests matching any of these are never decorated
    ignore_routes: tuple[str, ...] = ()
    ignore_route_patterns: tuple[str, ...] = ()
    ignore_uri_patterns: tuple[str, ...] = ()

    # Internal routes
    internal_route_prefix: str = "_page_internal_"
    reserved_route_prefix: str = "error"  # Internal pages may not shadow error routes

    # Containers
    container_setting: str = "name"  # Block setting holding the container name
    container_position: int = 1

    # Storage (SQL stores only)
    database_url: str = "sqlite:///:memory:"
    echo: bool = False

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> CmsConfig:
        """Build a config from a plain mapping, e.g. a parsed settings file.

        Lists become tuples so the result stays hashable and immutable.
        Unknown keys raise ``ConfigurationError`` rather than being ignored.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            msg = f"Unknown CMS configuration keys: {', '.join(unknown)}"
            raise ConfigurationError(msg)

        kwargs = {
            key: tuple(value) if isinstance(value, list) else value
            for key, value in values.items()
        }
        return cls(**kwargs)
