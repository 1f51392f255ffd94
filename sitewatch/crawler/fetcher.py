# sitewatch/crawler/fetcher.py
"""
Fetcher module: one GET per URL, content classification and gzip handling.

Failures are returned as values (:class:`NonOkStatus`, :class:`TransportError`)
so the crawl loop can log them and move on. There are no retries.
"""
from __future__ import annotations

import asyncio
import gzip
import logging
import zlib
from typing import Dict

from aiohttp import ClientError, ClientSession

from sitewatch.config import CrawlerConfig
from sitewatch.crawler.models import (
    ContentKind,
    FetchedResource,
    FetchOutcome,
    NonOkStatus,
    TransportError,
)

logger = logging.getLogger("SiteWatch")


def _decode(body: bytes, charset: str | None) -> str:
    try:
        return body.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


class Fetcher:
    """Issues GET requests through a shared session configured by the crawler.

    The session must be created with ``auto_decompress=False`` so gzip
    bodies reach :meth:`fetch` untouched.
    """

    def __init__(self, session: ClientSession, config: CrawlerConfig) -> None:
        self.session = session
        self.config = config
        self._headers: Dict[str, str] = config.custom_header

    async def fetch(self, url: str) -> FetchOutcome:
        """Fetch *url* and classify the response by its Content-Type header."""
        try:
            async with self.session.get(url, headers=self._headers) as resp:
                if not 200 <= resp.status < 300:
                    logger.warning("Status %s for %s", resp.status, url)
                    return NonOkStatus(url, resp.status)

                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                kind = ContentKind.from_mime(mime)
                if kind is ContentKind.OTHER:
                    logger.debug("Skipping %s with content type %r", url, mime)
                    return FetchedResource(url, mime, b"")

                body = await resp.read()
                if resp.headers.get("Content-Encoding", "").strip().lower() == "gzip":
                    body = gzip.decompress(body)

                if kind is ContentKind.BINARY:
                    logger.debug("Binary response (%s) for %s", mime, url)
                    return FetchedResource(url, mime, body)
                return FetchedResource(url, mime, _decode(body, resp.charset))
        except (ClientError, asyncio.TimeoutError, gzip.BadGzipFile, zlib.error, EOFError) as exc:
            detail = str(exc) or type(exc).__name__
            logger.warning("Failed %s: %s", url, detail)
            return TransportError(url, detail)
