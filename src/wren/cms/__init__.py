"""Page resolution, container lookup, and decoration eligibility.

    PageResolver -- resolve pages by url, route name, name, or id; per-request caches
    ContainerLocator -- find named containers up the page hierarchy, create lazily
    DecorationStrategy -- decide whether a response may get the site layout
"""

from wren.cms.containers import ContainerLocator
from wren.cms.decoration import DECORABLE_HEADER, DecorationStrategy
from wren.cms.locators import ById, ByPath, ByRoute, Current, Locator, parse_locator
from wren.cms.resolver import LOOKUP_FIELDS, PageResolver

__all__ = [
    "DECORABLE_HEADER",
    "LOOKUP_FIELDS",
    "ById",
    "ByPath",
    "ByRoute",
    "ContainerLocator",
    "Current",
    "DecorationStrategy",
    "Locator",
    "PageResolver",
    "parse_locator",
]
