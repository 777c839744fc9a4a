"""Wren — page resolution and layout decoration for CMS-backed sites.

Resolves the page behind a request (by URL path, route name, internal
name, or id), finds or lazily creates the named container blocks templates
render into, and decides whether a response may be wrapped in the site
layout.

Basic usage::

    from wren import PageResolver
    from wren.store import MemoryBlockStore, MemoryPageStore

    resolver = PageResolver(MemoryPageStore(), MemoryBlockStore())
    page = await resolver.resolve(site, "/about")
    header = await resolver.find_or_create_container("header", page)

Decoration::

    from wren import DecorationStrategy

    strategy = DecorationStrategy(ignore_routes=("login",))
    strategy.is_decorable(request, RequestKind.MAIN, response)
"""

__version__ = "0.1.0"
__all__ = [
    "Block",
    "CmsConfig",
    "ConfigurationError",
    "DecorationStrategy",
    "HTTPError",
    "InvalidArgument",
    "NotFound",
    "Page",
    "PageNotFound",
    "PageResolver",
    "Request",
    "RequestKind",
    "Response",
    "Site",
    "WrenError",
    "get_resolver",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "PageResolver":
        from wren.cms.resolver import PageResolver

        return PageResolver

    if name == "DecorationStrategy":
        from wren.cms.decoration import DecorationStrategy

        return DecorationStrategy

    if name == "CmsConfig":
        from wren.config import CmsConfig

        return CmsConfig

    if name in ("Request", "RequestKind"):
        from wren.http import request as _req

        return getattr(_req, name)

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in ("Block", "Page", "Site"):
        from wren import models as _models

        return getattr(_models, name)

    if name == "get_resolver":
        from wren.context import get_resolver

        return get_resolver

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidArgument",
        "NotFound",
        "PageNotFound",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
