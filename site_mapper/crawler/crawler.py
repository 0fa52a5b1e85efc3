# === FILE: site_mapper/crawler/crawler.py ===
"""
Site graph and the crawl orchestrator.

:class:`SiteGraph` owns the ``pages`` map. Worker tasks only ever touch the
:class:`Page` they were handed; discovering new pages, deduplicating them
and deciding when the crawl is over all happen in :meth:`SiteGraph.run`.
"""
from __future__ import annotations

import asyncio
import enum
import logging
import re
import time
from collections import deque
from typing import Deque, Dict, Optional, Set
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from pydantic import HttpUrl, TypeAdapter, ValidationError

from site_mapper.crawler.fetcher import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, Fetcher
from site_mapper.crawler.models import Page
from site_mapper.crawler.workers import WorkerPool
from site_mapper.errors import CrawlCancelled, InvalidConfiguration, InvalidURL
from site_mapper.metrics import CrawlStats, MetricsRecorder

__all__ = ("CrawlState", "SiteGraph", "new_crawl")

_HTTP_URL: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)
_SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


class CrawlState(enum.Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _parse_start_url(start_url: str, logger: logging.Logger):
    url = start_url.strip()
    if not _SCHEME_PREFIX.match(url):
        logger.info("No URL scheme specified for %r, using 'http'", start_url)
        url = "http://" + url
    try:
        _HTTP_URL.validate_python(url)
        parsed = urlsplit(url)
        parsed.port
    except (ValidationError, ValueError) as exc:
        raise InvalidURL(f"failed to parse page {start_url!r}: {exc}") from exc
    return parsed


class SiteGraph:
    """Directed graph of one site, built by a single call to :meth:`run`."""

    def __init__(
        self,
        start_url: str,
        worker_count: int,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        metrics: Optional[MetricsRecorder] = None,
    ) -> None:
        self.logger = logging.getLogger("SiteMapper")
        if not isinstance(worker_count, int) or worker_count < 1:
            raise InvalidConfiguration(f"worker count for a site graph must be > 0, got {worker_count!r}")

        start = _parse_start_url(start_url, self.logger)
        start_path = unquote(start.path) or "/"
        self.root_url: str = urlunsplit((start.scheme, start.netloc, "", "", ""))
        self.pages: Dict[str, Page] = {start_path: Page(self._page_url(start_path))}
        self.worker_count = worker_count
        self.timeout = timeout
        self.user_agent = user_agent
        self.metrics: MetricsRecorder = metrics if metrics is not None else CrawlStats()
        self.visited_count = 0
        self._state: Optional[CrawlState] = None

    @property
    def state(self) -> Optional[CrawlState]:
        """None until :meth:`run` is called."""
        return self._state

    def _page_url(self, path: str) -> str:
        scheme, netloc, _, _, _ = urlsplit(self.root_url)
        return urlunsplit((scheme, netloc, quote(path), "", ""))

    def add_pages(self, links: Dict[str, int]) -> list[Page]:
        """Create an unvisited page for every path not yet in ``pages``; return them."""
        added: list[Page] = []
        for path in links:
            if path not in self.pages:
                page = Page(self._page_url(path))
                self.pages[path] = page
                added.append(page)
        return added

    async def run(self, cancel: Optional[asyncio.Event] = None) -> None:
        """
        Crawl until every known page is visited.

        Raises CrawlCancelled if *cancel* is set first; ``pages`` then holds
        whatever was discovered up to that point.
        """
        if self._state is not None:
            raise RuntimeError(f"crawl of {self.root_url} already ran ({self._state.value})")
        self._state = CrawlState.RUNNING
        if cancel is None:
            cancel = asyncio.Event()

        self.logger.info("Crawling site %s with %d workers", self.root_url, self.worker_count)
        start = time.monotonic()
        frontier: asyncio.Queue[Page] = asyncio.Queue(maxsize=2 * self.worker_count)
        completed: asyncio.Queue[Page] = asyncio.Queue(maxsize=2 * self.worker_count)
        backlog: Deque[Page] = deque(p for p in self.pages.values() if not p.visited)

        try:
            async with Fetcher(self.timeout, self.user_agent) as fetcher:
                pool = WorkerPool(fetcher).start(self.worker_count, frontier, completed)
                try:
                    await self._drain(frontier, completed, backlog, cancel)
                finally:
                    await pool.stop()
        except (CrawlCancelled, asyncio.CancelledError):
            self._state = CrawlState.CANCELLED
            self.logger.warning(
                "Crawl of %s cancelled: %d of %d known pages visited",
                self.root_url, self.visited_count, len(self.pages),
            )
            raise

        duration = time.monotonic() - start
        self.logger.info("Crawl of %s finished: %d pages in %.2f s", self.root_url, len(self.pages), duration)

    async def _drain(
        self,
        frontier: asyncio.Queue[Page],
        completed: asyncio.Queue[Page],
        backlog: Deque[Page],
        cancel: asyncio.Event,
    ) -> None:
        """
        Orchestrator loop.

        Waits on a completed page, the cancel event and, while the backlog
        is not empty, a frontier insert for its head. The insert never blocks
        the processing of completed pages, and it is abandoned together with
        everything else on cancellation.
        """
        cancel_wait = asyncio.create_task(cancel.wait())
        get_task: Optional[asyncio.Task[Page]] = None
        put_task: Optional[asyncio.Task[None]] = None
        try:
            while True:
                self.metrics.set_page_count(len(self.pages))
                if self.visited_count == len(self.pages):
                    # every page was visited, so nothing is left in the backlog either
                    self._state = CrawlState.COMPLETED
                    return

                if get_task is None:
                    get_task = asyncio.create_task(completed.get())
                if put_task is None and backlog:
                    put_task = asyncio.create_task(frontier.put(backlog[0]))

                waiting: Set[asyncio.Future] = {get_task, cancel_wait}
                if put_task is not None:
                    waiting.add(put_task)
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)

                if put_task is not None and put_task in done:
                    put_task.result()
                    backlog.popleft()
                    put_task = None
                if get_task in done:
                    page = get_task.result()
                    get_task = None
                    self._complete(page, backlog)
                if cancel_wait in done:
                    raise CrawlCancelled(self.visited_count, len(self.pages))
        finally:
            pending = [t for t in (cancel_wait, get_task, put_task) if t is not None and not t.done()]
            for t in pending:
                t.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

    def _complete(self, page: Page, backlog: Deque[Page]) -> None:
        self.visited_count += 1
        self.metrics.increment_visited()
        new_pages = self.add_pages(page.links)
        backlog.extend(new_pages)
        self.logger.debug(
            "Visited %s (%d links, %d new)%s",
            page.path, len(page.links), len(new_pages), " [broken]" if page.broken else "",
        )


def new_crawl(start_url: str, worker_count: int, **options) -> SiteGraph:
    """Build a :class:`SiteGraph` seeded with *start_url*; see its constructor for options."""
    return SiteGraph(start_url, worker_count, **options)
