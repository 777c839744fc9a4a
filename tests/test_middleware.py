"""Tests for the middleware chain, resolver scoping, and decoration."""

import pytest

from wren.cms.decoration import DECORABLE_HEADER, DecorationStrategy
from wren.context import get_resolver
from wren.errors import ConfigurationError
from wren.http.request import Request, RequestKind
from wren.http.response import Response
from wren.middleware import DecorationMiddleware, Layout, PageResolverMiddleware, chain
from wren.models import Page

LAYOUT = "<html><body><nav>Site</nav>{{ content }}</body></html>"


def _request(path: str = "/about", route_name: str | None = "about", **kwargs) -> Request:
    return Request(method="GET", path=path, route_name=route_name, **kwargs)


async def _html(request: Request) -> Response:
    return Response("<p>body</p>")


# =============================================================================
# chain
# =============================================================================


class TestChain:
    async def test_order_is_outermost_first(self) -> None:
        calls: list[str] = []

        def tracer(label: str):
            async def mw(request, next):
                calls.append(f"{label}:in")
                response = await next(request)
                calls.append(f"{label}:out")
                return response

            return mw

        handler = chain(_html, [tracer("a"), tracer("b")])
        await handler(_request())
        assert calls == ["a:in", "b:in", "b:out", "a:out"]

    async def test_empty_chain(self) -> None:
        handler = chain(_html, [])
        response = await handler(_request())
        assert response.text == "<p>body</p>"

    async def test_middleware_can_short_circuit(self) -> None:
        async def deny(request, next):
            return Response("no", status=403)

        response = await chain(_html, [deny])(_request())
        assert response.status == 403


# =============================================================================
# Layout
# =============================================================================


class TestLayout:
    def test_substitutes_body(self) -> None:
        response = Layout(LAYOUT)(_request(), Response("<p>x</p>"))
        assert response.text == "<html><body><nav>Site</nav><p>x</p></body></html>"

    def test_bytes_body(self) -> None:
        response = Layout("[{{ content }}]")(_request(), Response(b"hi"))
        assert response.text == "[hi]"

    def test_custom_placeholder(self) -> None:
        layout = Layout("<main>%BODY%</main>", placeholder="%BODY%")
        assert layout(_request(), Response("x")).text == "<main>x</main>"

    def test_missing_placeholder(self) -> None:
        with pytest.raises(ConfigurationError, match="placeholder"):
            Layout("<html></html>")

    def test_keeps_status_and_headers(self) -> None:
        original = Response("x").with_header("X-Trace", "1")
        response = Layout("[{{ content }}]")(_request(), original)
        assert response.status == 200
        assert response.header("x-trace") == "1"


# =============================================================================
# PageResolverMiddleware
# =============================================================================


class TestPageResolverMiddleware:
    async def test_resolver_available_in_handler(self, pages, blocks) -> None:
        seen = []

        async def handler(request: Request) -> Response:
            seen.append(get_resolver())
            return Response("ok")

        await chain(handler, [PageResolverMiddleware(pages, blocks)])(_request())
        assert len(seen) == 1

    async def test_fresh_resolver_per_request(self, pages, blocks) -> None:
        seen = []

        async def handler(request: Request) -> Response:
            seen.append(get_resolver())
            return Response("ok")

        app = chain(handler, [PageResolverMiddleware(pages, blocks)])
        await app(_request())
        await app(_request())
        assert seen[0] is not seen[1]

    async def test_resolver_reset_after_request(self, pages, blocks) -> None:
        await chain(_html, [PageResolverMiddleware(pages, blocks)])(_request())
        with pytest.raises(LookupError):
            get_resolver()

    async def test_current_page_from_path(self, pages, blocks, site) -> None:
        page = pages.add(Page(url="/about"), site=site)
        seen = []

        async def handler(request: Request) -> Response:
            seen.append(get_resolver().current_page)
            return Response("ok")

        await chain(handler, [PageResolverMiddleware(pages, blocks, site=site)])(_request())
        assert seen == [page]

    async def test_unknown_path_leaves_current_page_unset(self, pages, blocks, site) -> None:
        seen = []

        async def handler(request: Request) -> Response:
            seen.append(get_resolver().current_page)
            return Response("ok")

        middleware = PageResolverMiddleware(pages, blocks, site=site)
        await chain(handler, [middleware])(_request("/missing"))
        assert seen == [None]

    async def test_no_site_skips_lookup(self, pages, blocks) -> None:
        await chain(_html, [PageResolverMiddleware(pages, blocks)])(_request())
        assert pages.queries == 0


# =============================================================================
# DecorationMiddleware
# =============================================================================


class TestDecorationMiddleware:
    async def test_decorates_html(self) -> None:
        app = chain(_html, [DecorationMiddleware(DecorationStrategy(), Layout(LAYOUT))])
        response = await app(_request())
        assert "<nav>Site</nav><p>body</p>" in response.text

    async def test_skips_sub_request(self) -> None:
        app = chain(_html, [DecorationMiddleware(DecorationStrategy(), Layout(LAYOUT))])
        response = await app(_request(kind=RequestKind.SUB))
        assert response.text == "<p>body</p>"

    async def test_skips_ignored_route(self) -> None:
        strategy = DecorationStrategy(ignore_routes=("about",))
        app = chain(_html, [DecorationMiddleware(strategy, Layout(LAYOUT))])
        response = await app(_request())
        assert response.text == "<p>body</p>"

    async def test_skips_opt_out(self) -> None:
        async def handler(request: Request) -> Response:
            return Response("<p>raw</p>").with_header(DECORABLE_HEADER, "false")

        app = chain(handler, [DecorationMiddleware(DecorationStrategy(), Layout(LAYOUT))])
        response = await app(_request())
        assert response.text == "<p>raw</p>"

    async def test_skips_undecorated_page(self, pages, blocks, site) -> None:
        pages.add(Page(url="/about", decorate=False), site=site)
        app = chain(
            _html,
            [
                PageResolverMiddleware(pages, blocks, site=site),
                DecorationMiddleware(DecorationStrategy(), Layout(LAYOUT)),
            ],
        )
        response = await app(_request())
        assert response.text == "<p>body</p>"

    async def test_decorates_decorated_page(self, pages, blocks, site) -> None:
        pages.add(Page(url="/about"), site=site)
        app = chain(
            _html,
            [
                PageResolverMiddleware(pages, blocks, site=site),
                DecorationMiddleware(DecorationStrategy(), Layout(LAYOUT)),
            ],
        )
        response = await app(_request())
        assert response.text.startswith("<html>")

    async def test_async_decorator(self) -> None:
        async def decorate(request: Request, response: Response) -> Response:
            return response.with_body(f"<div>{response.text}</div>")

        app = chain(_html, [DecorationMiddleware(DecorationStrategy(), decorate)])
        response = await app(_request())
        assert response.text == "<div><p>body</p></div>"
