"""site_mapper.crawler: link normalization, fetching, worker pool and the crawl orchestrator."""

from site_mapper.crawler.crawler import CrawlState, SiteGraph, new_crawl
from site_mapper.crawler.fetcher import Fetcher
from site_mapper.crawler.link_extractor import extract_links, normalize_link
from site_mapper.crawler.models import Page
from site_mapper.crawler.workers import WorkerPool

__all__ = [
    "CrawlState",
    "Fetcher",
    "Page",
    "SiteGraph",
    "WorkerPool",
    "extract_links",
    "new_crawl",
    "normalize_link",
]
