# File: sitewatch/crawler/__init__.py
"""sitewatch.crawler: crawl engine (codec, extractor, fetcher, persister, controller)."""

from .crawler import ConfirmCallback, Crawler
from .models import CrawlResult, CrawlState, RoundSummary, TerminationReason, VisitedRegistry

__all__ = [
    "Crawler",
    "ConfirmCallback",
    "CrawlResult",
    "CrawlState",
    "RoundSummary",
    "TerminationReason",
    "VisitedRegistry",
]
