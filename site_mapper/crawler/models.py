# site_mapper/crawler/models.py
"""
Data models for the SiteMapper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional
from urllib.parse import unquote, urlsplit

from site_mapper.crawler.link_extractor import normalize_link


@dataclass(slots=True)
class Page:
    """
    One node of the site graph.

    ``links`` maps each same-site path found on the page to the number of
    hrefs pointing at it. A page is written only by the worker visiting it,
    so no locking is involved.
    """

    url: str
    visited: bool = False
    broken: bool = False
    links: Dict[str, int] = field(default_factory=dict)
    last_error: Optional[BaseException] = None

    @property
    def path(self) -> str:
        """Percent-decoded path, the key of this page in the site graph."""
        return unquote(urlsplit(self.url).path) or "/"

    def add_links(self, raw_links: Iterable[str]) -> None:
        """Count every raw link that normalizes to another page of the site."""
        for raw in raw_links:
            link_path = normalize_link(self.url, raw)
            if link_path is not None:
                self.links[link_path] = self.links.get(link_path, 0) + 1
