# File: sitewatch/engine.py
"""sitewatch.engine: orchestration of crawls, comparisons and scheduled runs."""

from __future__ import annotations

import asyncio
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from sitewatch.compare import ComparisonReport, compare_folders
from sitewatch.config import CrawlerConfig, load_config
from sitewatch.crawler import ConfirmCallback, Crawler, CrawlResult
from sitewatch.crawler.codec import encode
from sitewatch.logger import logger
from sitewatch.notify import EmailNotifier, build_notifier
from sitewatch.utils import resolve_path

__all__ = ["Engine", "start_crawl", "prepare_output_dir", "ORIGINAL_DIR", "LATEST_DIR"]

ORIGINAL_DIR = "originalFolder"
LATEST_DIR = "latestFolder"


def prepare_output_dir(config: CrawlerConfig, now: Optional[datetime] = None) -> Path:
    """Create and return the directory for a new run.

    Scheduled runs alternate between two fixed folders: ``originalFolder``
    when it does not exist yet, ``latestFolder`` otherwise. Interactive runs
    get a folder named after the root URL and a timestamp.
    """
    base = Path(config.file_path).expanduser()
    if config.run_scheduled:
        name = LATEST_DIR if (base / ORIGINAL_DIR).exists() else ORIGINAL_DIR
    else:
        stamp = (now or datetime.now()).strftime("%d-%m-%Y %H-%M-%S")
        name = f"{encode(config.root_url)}-{stamp}"
    path = base / name
    path.mkdir(parents=True, exist_ok=True)
    logger.info("New folder has been created: %s", path)
    return path


async def start_crawl(
    config: CrawlerConfig,
    output_dir: Union[str, Path],
    confirm: Optional[ConfirmCallback] = None,
) -> CrawlResult:
    """Run the crawler inside its session context and return the result."""
    async with Crawler(config, output_dir, confirm=confirm) as crawler:
        return await crawler.crawl()


class Engine:
    """Facade for the CLI and tests: crawl, compare, notify and rotate."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        return load_config(path)

    def __init__(
        self,
        config: CrawlerConfig,
        confirm: Optional[ConfirmCallback] = None,
        notifier: Optional[EmailNotifier] = None,
    ) -> None:
        self.config = config
        self.confirm = confirm
        self.notifier = notifier if notifier is not None else build_notifier(config.email)

    def run_crawl(self) -> CrawlResult:
        """Crawl into a fresh run directory and email the summary when enabled."""
        output_dir = prepare_output_dir(self.config)
        result = asyncio.run(start_crawl(self.config, output_dir, self.confirm))

        if result.success:
            logger.info("Web scrape completed successfully! %d urls parsed", result.url_count)
            if self.notifier is not None:
                self.notifier.send_crawl_summary(self.config.root_url, result)
        else:
            logger.error("Unable to complete web scrape of %s", self.config.root_url)
        return result

    def resolve_folder(self, folder: Union[str, Path]) -> Path:
        """Accept a folder path or a run folder name under ``file_path``."""
        return resolve_path(folder, base=self.config.file_path)

    def run_compare(self, first: Union[str, Path], second: Union[str, Path]) -> ComparisonReport:
        report = compare_folders(self.resolve_folder(first), self.resolve_folder(second))
        if report.complete and self.notifier is not None:
            self.notifier.send_comparison(self.config.root_url, report)
        return report

    def run_scheduled(self) -> tuple[CrawlResult, Optional[ComparisonReport]]:
        """Crawl, then compare and rotate once both fixed folders exist."""
        if not self.config.run_scheduled:
            self.config = self.config.model_copy(update={"run_scheduled": True})
        result = self.run_crawl()

        base = Path(self.config.file_path).expanduser()
        original, latest = base / ORIGINAL_DIR, base / LATEST_DIR
        if not (original.is_dir() and latest.is_dir()):
            return result, None

        report = self.run_compare(original, latest)
        logger.info("Deleting original folder and renaming latest folder")
        shutil.rmtree(original)
        latest.rename(original)
        return result, report
