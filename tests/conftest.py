# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

import pytest
import pytest_asyncio
from aiohttp import web

from site_mapper.crawler.crawler import SiteGraph

#: path -> HTML body (status 200) or (status, body)
PageSpec = Union[str, Tuple[int, str]]
Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@dataclass
class FixtureSite:
    """A running local test site."""

    base_url: str
    hits: Counter = field(default_factory=Counter)

    def url(self, path: str = "/") -> str:
        return self.base_url + path


def links_html(*paths: str) -> str:
    """Build a small HTML page with one anchor per path, in order."""
    anchors = "".join(f'<a href="{p}">{p}</a>' for p in paths)
    return f"<html><body>{anchors}</body></html>"


#: `/` -> [/a, /b]; `/a` -> [/, /c]; `/b` -> []; `/c` is missing (404)
SCENARIO_PAGES: Dict[str, PageSpec] = {
    "/": links_html("/a", "/b"),
    "/a": links_html("/", "/c"),
    "/b": "<html><body><p>leaf</p></body></html>",
}


@pytest_asyncio.fixture
async def site_server(unused_tcp_port_factory) -> AsyncIterator[Callable[..., Awaitable[FixtureSite]]]:
    """
    Factory fixture: ``await site_server(pages, handlers=None)`` starts a site.

    Unknown paths answer 404. Every request is counted in ``FixtureSite.hits``.
    """
    runners: list[web.AppRunner] = []

    async def _start(
        pages: Dict[str, PageSpec],
        handlers: Optional[Dict[str, Handler]] = None,
    ) -> FixtureSite:
        port = unused_tcp_port_factory()
        site_info = FixtureSite(f"http://127.0.0.1:{port}")
        app = web.Application()

        def make_handler(path: str, status: int, body: str) -> Handler:
            async def handle(_: web.Request) -> web.Response:
                site_info.hits[path] += 1
                return web.Response(status=status, text=body, content_type="text/html")

            return handle

        for path, spec in pages.items():
            status, body = spec if isinstance(spec, tuple) else (200, spec)
            app.router.add_get(path, make_handler(path, status, body))
        for path, handler in (handlers or {}).items():
            app.router.add_get(path, handler)

        runner = web.AppRunner(app)
        await runner.setup()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        return site_info

    yield _start

    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def offline_graph() -> SiteGraph:
    """
    A graph assembled by hand, without crawling: the terminal state of the
    `/`, `/a`, `/b`, `/c` scenario.
    """
    graph = SiteGraph("http://example.com", 2)
    graph.pages["/"].visited = True
    graph.pages["/"].links = {"/a": 1, "/b": 2}
    graph.add_pages(graph.pages["/"].links)
    graph.pages["/a"].visited = True
    graph.pages["/a"].links = {"/": 1, "/c": 1}
    graph.add_pages(graph.pages["/a"].links)
    graph.pages["/b"].visited = True
    graph.pages["/c"].visited = True
    graph.pages["/c"].broken = True
    return graph
