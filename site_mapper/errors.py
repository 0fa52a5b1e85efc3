"""
Exception hierarchy for SiteMapper.

Construction problems (:class:`InvalidConfiguration`, :class:`InvalidURL`) are
fatal; :class:`LinkParseFailure` and :class:`FetchFailure` are recovered where
they happen; :class:`CrawlCancelled` reports an incomplete crawl.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "SiteMapperError",
    "InvalidConfiguration",
    "InvalidURL",
    "LinkParseFailure",
    "FetchFailure",
    "CrawlCancelled",
)


class SiteMapperError(Exception):
    """Base class for every error raised by site_mapper."""


class InvalidConfiguration(SiteMapperError):
    """The crawl parameters are unusable, e.g. fewer than one worker."""


class InvalidURL(SiteMapperError):
    """The starting URL could not be parsed."""


class LinkParseFailure(SiteMapperError):
    """A single href could not be parsed; it is dropped."""

    def __init__(self, link: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"failed to parse link {link!r}: {cause}")
        self.link = link
        self.cause = cause


class FetchFailure(SiteMapperError):
    """A GET failed with a transport error or a non-2xx status."""

    def __init__(
        self,
        url: str,
        *,
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        if status is not None:
            reason = f"status code {status}"
        else:
            reason = str(cause) or type(cause).__name__
        super().__init__(f"GET {url} failed: {reason}")
        self.url = url
        self.status = status
        self.cause = cause


class CrawlCancelled(SiteMapperError):
    """The crawl was stopped before every known page was visited."""

    def __init__(self, visited: int, known: int) -> None:
        super().__init__(f"crawl cancelled after visiting {visited} of {known} known pages")
        self.visited = visited
        self.known = known
