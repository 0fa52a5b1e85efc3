# site_mapper/crawler/workers.py
"""
Worker pool: a fixed number of asyncio tasks moving pages from the
frontier queue, through :meth:`Fetcher.visit`, to the completed queue.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List

from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.models import Page

__all__ = ("WorkerPool",)


class WorkerPool:
    """Runs ``count`` workers that share nothing but the two queues."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher
        self._workers: List[asyncio.Task[None]] = []
        self.logger = logging.getLogger("SiteMapper")

    @property
    def running(self) -> bool:
        return any(not w.done() for w in self._workers)

    def start(
        self,
        count: int,
        frontier: asyncio.Queue[Page],
        completed: asyncio.Queue[Page],
    ) -> WorkerPool:
        if count < 1:
            raise ValueError("worker count must be >= 1")
        for n in range(count):
            task = asyncio.create_task(self._worker(frontier, completed), name=f"site-mapper-worker-{n}")
            self._workers.append(task)
        self.logger.debug("Started %d workers", count)
        return self

    async def stop(self) -> None:
        """
        Stop every worker right away.

        In-flight fetches are abandoned and pages still waiting in the
        frontier are left there. Only the cancelled tasks are reaped.
        """
        workers, self._workers = self._workers, []
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        self.logger.debug("Stopped %d workers", len(workers))

    async def _worker(self, frontier: asyncio.Queue[Page], completed: asyncio.Queue[Page]) -> None:
        while True:
            page = await frontier.get()
            try:
                await self.fetcher.visit(page)
            except Exception as exc:
                self.logger.exception("Unexpected error visiting %s", page.url)
                page.visited = True
                page.broken = True
                page.links.clear()
                page.last_error = exc
            await completed.put(page)
