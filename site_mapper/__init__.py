# site_mapper/__init__.py
"""
SiteMapper package initializer.
Builds a directed graph of a single website by crawling it concurrently.
"""
__version__ = "0.1.0"

from site_mapper.crawler.crawler import CrawlState, SiteGraph, new_crawl  # noqa: E402
from site_mapper.errors import (  # noqa: E402
    CrawlCancelled,
    FetchFailure,
    InvalidConfiguration,
    InvalidURL,
    LinkParseFailure,
    SiteMapperError,
)

__all__ = [
    "__version__",
    "CrawlCancelled",
    "CrawlState",
    "FetchFailure",
    "InvalidConfiguration",
    "InvalidURL",
    "LinkParseFailure",
    "SiteGraph",
    "SiteMapperError",
    "new_crawl",
]
