# === FILE: sitewatch/crawler/crawler.py ===
from __future__ import annotations

import inspect
import logging
import time
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Union

from aiohttp import ClientSession, ClientTimeout

from sitewatch.config import CrawlerConfig
from sitewatch.crawler import persister
from sitewatch.crawler.codec import binary_filename, text_filename
from sitewatch.crawler.fetcher import Fetcher
from sitewatch.crawler.link_extractor import extract_links
from sitewatch.crawler.models import (
    ContentKind,
    CrawlResult,
    CrawlState,
    FetchedResource,
    RoundSummary,
    TerminationReason,
    VisitedRegistry,
)
from sitewatch.utils import remove_duplicates

__all__ = ("Crawler", "ConfirmCallback")

ConfirmCallback = Callable[[RoundSummary], Union[bool, Awaitable[bool]]]


class Crawler:
    """Breadth-first crawler of a single site.

    Each round fetches the URLs discovered in the previous one, strictly one
    after another. URLs enter the visited registry before they are fetched,
    so a failing URL is never queued again.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        output_dir: Union[str, Path],
        *,
        confirm: Optional[ConfirmCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.output_dir = Path(output_dir)
        self.root_url: str = config.root_url
        self.visited = VisitedRegistry()
        self.state = CrawlState.SEEDING
        self.reason: Optional[TerminationReason] = None
        self.files_written = 0
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self.logger = logging.getLogger("SiteWatch")
        self._confirm = confirm
        self._clock = clock

    async def __aenter__(self) -> Crawler:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.request_timeout),
            headers={"User-Agent": self.config.user_agent, "Accept-Encoding": "gzip"},
            auto_decompress=False,
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlResult:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info("Crawl started: %s -> %s", self.root_url, self.output_dir)

        batch: List[str] = [self.root_url]
        round_number = 0
        while True:
            round_number += 1
            round_started = self._clock()
            discovered: List[str] = []

            for url in batch:
                self.visited.add(url)

                self.state = CrawlState.CHECKING_LIMITS
                reason = self._limit_reached(round_started)
                if reason is not None:
                    return self._finish(reason)

                self.state = CrawlState.FETCHING_BATCH
                discovered.extend(await self._process(url))

            self.state = CrawlState.DEDUPLICATING
            pending = [u for u in remove_duplicates(discovered) if u not in self.visited]
            elapsed = self._clock() - round_started
            self.logger.info(
                "Currently parsed: %d urls in %.2f s. %d ready to be parsed",
                len(self.visited), elapsed, len(pending),
            )
            if not pending:
                return self._finish(TerminationReason.NO_NEW_URLS)

            if self.config.iteration_break and self._confirm is not None:
                self.state = CrawlState.PAUSED_FOR_CONFIRMATION
                summary = RoundSummary(round_number, len(self.visited), len(pending), elapsed)
                if not await self._ask(summary):
                    return self._finish(TerminationReason.OPERATOR_CANCELLED)

            batch = pending

    async def _process(self, url: str) -> List[str]:
        """Fetch, persist and scan one URL; return the URLs it links to."""
        outcome = await self.fetcher.fetch(url)  # type: ignore[union-attr]
        if not isinstance(outcome, FetchedResource):
            return []
        self.logger.info("Response successful: %s", url)

        if outcome.kind is ContentKind.BINARY:
            self._save(outcome.content, binary_filename(url, outcome.content_type))
            return []
        if outcome.kind is not ContentKind.TEXT:
            return []

        text = outcome.content
        if not isinstance(text, str) or not text.strip():
            return []
        self._save(text, text_filename(url))

        self.state = CrawlState.EXTRACTING_BATCH
        links = extract_links(text, self.root_url)
        if links:
            self.logger.debug("%d urls obtained from %s", len(links), url)
        return links

    def _save(self, content, name: str) -> None:
        if persister.save(content, name, self.output_dir).ok:
            self.files_written += 1

    def _limit_reached(self, round_started: float) -> Optional[TerminationReason]:
        limit = self.config.url_limit
        if limit is not None and len(self.visited) > limit:
            self.logger.info("Url limit %d reached. %d urls have been parsed", limit, len(self.visited))
            return TerminationReason.URL_LIMIT_REACHED

        time_limit = self.config.time_limit
        if time_limit is not None and not self.config.iteration_break:
            if self._clock() - round_started > time_limit.total_seconds():
                self.logger.info("Time limit %s reached. %d urls have been parsed", time_limit, len(self.visited))
                return TerminationReason.TIME_LIMIT_REACHED
        return None

    async def _ask(self, summary: RoundSummary) -> bool:
        answer = self._confirm(summary)  # type: ignore[misc]
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    def _finish(self, reason: TerminationReason) -> CrawlResult:
        self.state = CrawlState.TERMINATED
        self.reason = reason
        self.logger.info("Crawl finished (%s): %d urls, %d files", reason.value, len(self.visited), self.files_written)
        return CrawlResult(
            reason=reason,
            visited=self.visited.urls(),
            output_dir=self.output_dir,
            files_written=self.files_written,
        )
