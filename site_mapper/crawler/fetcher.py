# site_mapper/crawler/fetcher.py
"""
Fetcher module: one GET per page, no retries, fixed per-request timeout.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mapper.crawler.link_extractor import extract_links
from site_mapper.crawler.models import Page
from site_mapper.errors import FetchFailure

DEFAULT_TIMEOUT = 5.0
DEFAULT_USER_AGENT = "SiteMapperBot/1.0"


class Fetcher:
    """Fetches pages over a shared aiohttp session and fills in their links."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("SiteMapper")

    async def __aenter__(self) -> Fetcher:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> bytes:
        """
        GET *url* and return the raw body.

        Raises FetchFailure on any transport error or a status outside 200-299.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status <= 299:
                    raise FetchFailure(url, status=resp.status)
                return await resp.read()
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchFailure(url, cause=exc) from exc

    async def visit(self, page: Page) -> None:
        """Fetch *page*, then either mark it broken or record its links."""
        page.visited = True
        try:
            body = await self.fetch(page.url)
        except FetchFailure as exc:
            self.logger.warning("Broken page %s: %s", page.url, exc)
            page.broken = True
            page.last_error = exc
            return
        page.add_links(extract_links(body))
