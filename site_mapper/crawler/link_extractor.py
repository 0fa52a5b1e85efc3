# site_mapper/crawler/link_extractor.py
"""
Link extraction and normalization for SiteMapper.

``extract_links`` returns raw hrefs exactly as written in the page;
``normalize_link`` decides whether one of them points to another page of
the same site and, if so, returns the path it is tracked under.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union
from urllib.parse import SplitResult, unquote, urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_mapper.errors import LinkParseFailure

__all__ = ("extract_links", "normalize_link", "parse_link")

logger = logging.getLogger("SiteMapper")

_ALLOWED_SCHEMES = ("http", "https")


def extract_links(body: Union[str, bytes]) -> List[str]:
    """
    Return the href of every <a> tag in document order.

    Nothing is filtered or deduplicated here.
    """
    soup = BeautifulSoup(body, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if isinstance(href, str):
            links.append(href)
    return links


def parse_link(link: str) -> SplitResult:
    """Split *link*, raising :class:`LinkParseFailure` when it is malformed."""
    try:
        parsed = urlsplit(link)
        # port is parsed lazily; touching it surfaces bad ports now
        parsed.port
    except ValueError as exc:
        raise LinkParseFailure(link, exc) from exc
    return parsed


def normalize_link(base_url: str, link: str) -> Optional[str]:
    """
    Resolve *link* found on the page at *base_url* to a same-site path.

    Returns ``None`` when the link is malformed, uses a scheme other than
    http(s), points to another host, or points back to *base_url* itself.
    Query and fragment are dropped. The returned path is percent-decoded,
    so ``/a%20b`` and ``/a b`` are the same page. Otherwise paths are
    compared exactly: ``/docs/`` and ``/docs`` are different pages.
    """
    try:
        parsed = parse_link(link)
    except LinkParseFailure as exc:
        logger.debug("Dropping link on %s: %s", base_url, exc)
        return None

    base = urlsplit(base_url)
    if not parsed.scheme:
        parsed = urlsplit(urljoin(base_url, link))

    path = unquote(parsed.path) or "/"
    if parsed.scheme not in _ALLOWED_SCHEMES:
        return None
    if parsed.netloc != base.netloc or path == (unquote(base.path) or "/"):
        return None
    return path
