# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import web

from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.models import Page
from site_mapper.crawler.workers import WorkerPool
from site_mapper.errors import FetchFailure

from .conftest import links_html

HELLO_WORLD = links_html("./", "http://play.golang.org/p/2C7wwJ6nxG", "values", "mailto:me@example.com", "/values")


@pytest.mark.asyncio()
async def test_fetch_success_and_failure(site_server):
    site = await site_server({"/hello-world": HELLO_WORLD, "/teapot": (418, "short and stout")})
    async with Fetcher(timeout=2.0) as fetcher:
        body = await fetcher.fetch(site.url("/hello-world"))
        assert b"values" in body

        with pytest.raises(FetchFailure) as info:
            await fetcher.fetch(site.url("/goodbye-world"))
        assert info.value.status == 404

        with pytest.raises(FetchFailure) as info:
            await fetcher.fetch(site.url("/teapot"))
        assert info.value.status == 418


@pytest.mark.asyncio()
async def test_fetch_transport_error(unused_tcp_port):
    async with Fetcher(timeout=2.0) as fetcher:
        with pytest.raises(FetchFailure) as info:
            await fetcher.fetch(f"http://127.0.0.1:{unused_tcp_port}/")
    assert info.value.status is None
    assert info.value.cause is not None


@pytest.mark.asyncio()
async def test_fetch_timeout_is_a_failure(site_server):
    async def slow(_):
        await asyncio.sleep(1.0)
        return web.Response(text="late", content_type="text/html")

    site = await site_server({}, handlers={"/slow": slow})
    async with Fetcher(timeout=0.2) as fetcher:
        with pytest.raises(FetchFailure):
            await fetcher.fetch(site.url("/slow"))


@pytest.mark.asyncio()
async def test_fetch_requires_session():
    with pytest.raises(RuntimeError):
        await Fetcher().fetch("http://example.com/")


@pytest.mark.asyncio()
async def test_visit_collects_links(site_server):
    site = await site_server({"/hello-world": HELLO_WORLD})
    page = Page(site.url("/hello-world"))
    async with Fetcher() as fetcher:
        await fetcher.visit(page)
    assert page.visited
    assert not page.broken
    assert page.last_error is None
    assert page.links == {"/": 1, "/values": 2}


@pytest.mark.asyncio()
async def test_visit_marks_broken(site_server):
    site = await site_server({"/": links_html("/missing")})
    page = Page(site.url("/missing"))
    async with Fetcher() as fetcher:
        await fetcher.visit(page)
    assert page.visited
    assert page.broken
    assert page.links == {}
    assert isinstance(page.last_error, FetchFailure)
    assert page.last_error.status == 404


@pytest.mark.asyncio()
async def test_worker_pool_moves_pages(site_server):
    site = await site_server({"/": links_html("/a"), "/a": links_html("/")})
    frontier: asyncio.Queue[Page] = asyncio.Queue(maxsize=4)
    completed: asyncio.Queue[Page] = asyncio.Queue(maxsize=4)
    pages = [Page(site.url("/")), Page(site.url("/a"))]
    for page in pages:
        frontier.put_nowait(page)

    async with Fetcher() as fetcher:
        pool = WorkerPool(fetcher).start(2, frontier, completed)
        assert pool.running
        done = [await asyncio.wait_for(completed.get(), timeout=5) for _ in pages]
        await pool.stop()

    assert not pool.running
    assert {id(p) for p in done} == {id(p) for p in pages}
    assert all(p.visited for p in done)
    assert pages[0].links == {"/a": 1}


@pytest.mark.asyncio()
async def test_worker_pool_stop_abandons_in_flight(site_server):
    release = asyncio.Event()
    started = asyncio.Event()

    async def stuck(_):
        started.set()
        await release.wait()
        return web.Response(text="", content_type="text/html")

    site = await site_server({}, handlers={"/stuck": stuck})
    frontier: asyncio.Queue[Page] = asyncio.Queue(maxsize=2)
    completed: asyncio.Queue[Page] = asyncio.Queue(maxsize=2)
    try:
        async with Fetcher(timeout=30) as fetcher:
            pool = WorkerPool(fetcher).start(1, frontier, completed)
            frontier.put_nowait(Page(site.url("/stuck")))
            frontier.put_nowait(Page(site.url("/stuck")))
            await asyncio.wait_for(started.wait(), timeout=5)
            await asyncio.wait_for(pool.stop(), timeout=2)
        assert completed.empty()
        # the second page was never picked up
        assert frontier.qsize() == 1
    finally:
        release.set()


def test_worker_pool_rejects_zero_workers():
    with pytest.raises(ValueError):
        WorkerPool(Fetcher()).start(0, asyncio.Queue(), asyncio.Queue())
