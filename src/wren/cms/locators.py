"""Page locators — a tagged variant instead of runtime type sniffing.

Callers that know what they hold build the variant directly::

    await resolver.resolve(site, ByPath("/about"))
    await resolver.resolve(site, ById(42))

Callers holding a raw value (a template argument, a config entry) convert
it once with ``parse_locator``.
"""

from dataclasses import dataclass
from typing import Any

from wren.errors import InvalidArgument


@dataclass(frozen=True, slots=True)
class ByPath:
    """Locate a page by its URL path."""

    url: str


@dataclass(frozen=True, slots=True)
class ByRoute:
    """Locate a page by the route name it backs."""

    route_name: str


@dataclass(frozen=True, slots=True)
class ById:
    """Locate a page by its store id."""

    page_id: int


@dataclass(frozen=True, slots=True)
class Current:
    """The page currently active on the resolver."""


type Locator = ByPath | ByRoute | ById | Current


def parse_locator(value: Any) -> Locator:
    """Classify a raw locator value.

    - a string starting with ``/`` is a URL path
    - any other non-empty string is a route name
    - an ``int`` is a page id, including ``0``
    - any other falsy value (``None``, ``""``, ``False``) means the current page

    Locators pass through unchanged. ``bool`` is not a page id.

    Raises:
        InvalidArgument: For any other type.
    """
    if isinstance(value, ByPath | ByRoute | ById | Current):
        return value
    if isinstance(value, str) and value:
        if value.startswith("/"):
            return ByPath(value)
        return ByRoute(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return ById(value)
    if not value:
        return Current()
    msg = f"Unsupported page locator: {value!r}"
    raise InvalidArgument(msg)
