# sitewatch/crawler/link_extractor.py
"""
Link discovery for SiteWatch.

Two independent passes over a fetched text body:

* absolute ``http(s)://`` URLs that belong to the crawled site,
* root-relative ``href="/..."`` attributes, appended to the root URL.
"""
from __future__ import annotations

import re
from typing import List

from sitewatch.crawler.codec import encode
from sitewatch.utils import remove_duplicates

_ABSOLUTE_URL_RE = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"[-a-zA-Z0-9()@:%_+.~#?&/=]*",
    re.IGNORECASE,
)
_HREF_RE = re.compile(r'href="(/[^"]*)"', re.IGNORECASE)
_HREF_MARKER = 'href="/'


def extract_absolute_urls(text: str, root_url: str) -> List[str]:
    """
    Find every absolute URL in *text* that belongs to *root_url*.

    A match is kept when its encoded form contains the encoded root URL.
    Query strings are cut off at the first ``?``.
    """
    site_key = encode(root_url)
    urls: List[str] = []
    for match in _ABSOLUTE_URL_RE.finditer(text):
        candidate = match.group(0)
        if site_key not in encode(candidate):
            continue
        urls.append(candidate.split("?", 1)[0])
    return remove_duplicates(urls)


def extract_relative_urls(text: str, root_url: str) -> List[str]:
    """Resolve ``href="/path"`` values against *root_url* by concatenation."""
    urls: List[str] = []
    for line in text.splitlines():
        if _HREF_MARKER not in line:
            continue
        urls.extend(root_url + path for path in _HREF_RE.findall(line))
    return remove_duplicates(urls)


def extract_links(text: str, root_url: str) -> List[str]:
    """Union of both passes, first-seen order, exact-string dedup."""
    return remove_duplicates(
        extract_absolute_urls(text, root_url) + extract_relative_urls(text, root_url)
    )


__all__ = ["extract_links", "extract_absolute_urls", "extract_relative_urls"]
