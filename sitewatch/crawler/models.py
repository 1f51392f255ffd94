# sitewatch/crawler/models.py
"""
Data models for the SiteWatch crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union


class ContentKind(str, Enum):
    """How a response body is handled, chosen by its top-level MIME type."""

    TEXT = "text"
    BINARY = "binary"
    OTHER = "other"

    @classmethod
    def from_mime(cls, mime: str) -> ContentKind:
        top = mime.split("/", 1)[0].strip().lower()
        if top == "text":
            return cls.TEXT
        if top in ("image", "application"):
            return cls.BINARY
        return cls.OTHER


@dataclass(slots=True)
class FetchedResource:
    """A successful response: URL, MIME type and body (text or binary)."""

    url: str
    content_type: str
    content: Union[str, bytes]

    @property
    def kind(self) -> ContentKind:
        return ContentKind.from_mime(self.content_type)


@dataclass(slots=True, frozen=True)
class NonOkStatus:
    """The server answered with a status outside 2xx."""

    url: str
    status: int


@dataclass(slots=True, frozen=True)
class TransportError:
    """The request never produced a usable response."""

    url: str
    detail: str


FetchOutcome = Union[FetchedResource, NonOkStatus, TransportError]


@dataclass(slots=True, frozen=True)
class SaveOutcome:
    """Result of writing one resource to the run directory."""

    ok: bool
    path: Optional[Path] = None
    error: Optional[str] = None


class CrawlState(str, Enum):
    SEEDING = "seeding"
    FETCHING_BATCH = "fetching_batch"
    EXTRACTING_BATCH = "extracting_batch"
    DEDUPLICATING = "deduplicating"
    CHECKING_LIMITS = "checking_limits"
    PAUSED_FOR_CONFIRMATION = "paused_for_confirmation"
    TERMINATED = "terminated"


class TerminationReason(str, Enum):
    NO_NEW_URLS = "no_new_urls"
    URL_LIMIT_REACHED = "url_limit_reached"
    TIME_LIMIT_REACHED = "time_limit_reached"
    OPERATOR_CANCELLED = "operator_cancelled"


class VisitedRegistry:
    """Ordered set of every URL ever enqueued for fetching.

    URLs are only ever added; the registry never shrinks.
    """

    def __init__(self) -> None:
        self._urls: Dict[str, None] = {}

    def add(self, url: str) -> bool:
        """Register *url*; return False when it was already present."""
        if url in self._urls:
            return False
        self._urls[url] = None
        return True

    def urls(self) -> List[str]:
        return list(self._urls)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)


@dataclass(slots=True, frozen=True)
class RoundSummary:
    """Progress snapshot handed to the step-mode confirmation callback."""

    round_number: int
    visited_count: int
    pending_count: int
    elapsed: float


@dataclass(slots=True)
class CrawlResult:
    """Outcome of one crawl run."""

    reason: TerminationReason
    visited: List[str] = field(default_factory=list)
    output_dir: Optional[Path] = None
    files_written: int = 0

    @property
    def url_count(self) -> int:
        return len(self.visited)

    @property
    def success(self) -> bool:
        """At least one resource was saved to disk."""
        return self.files_written > 0

    def as_tuple(self) -> Tuple[bool, int]:
        """``(success, total URLs visited)`` as reported to callers."""
        return (self.success, self.url_count) if self.success else (False, 0)
