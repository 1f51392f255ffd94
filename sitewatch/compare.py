# File: sitewatch/compare.py
"""sitewatch.compare: comparison of two crawl run directories."""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Set, Tuple, Union

from bs4 import BeautifulSoup

from sitewatch.crawler.codec import decode
from sitewatch.logger import logger

TEXT_SUFFIXES = (".txt", ".html")
_HTML_LINE_RE = re.compile(r"<\s*([^ >]+)[^>]*>.*?<\s*/\s*\1\s*>")


@dataclass(slots=True)
class ComparisonReport:
    """Differences between an *original* and a *latest* run directory."""

    original: str
    latest: str
    files_added: List[str] = field(default_factory=list)
    files_removed: List[str] = field(default_factory=list)
    files_changed: List[str] = field(default_factory=list)
    lines_added: List[str] = field(default_factory=list)
    lines_removed: List[str] = field(default_factory=list)
    complete: bool = False

    @property
    def has_changes(self) -> bool:
        return bool(self.files_added or self.files_removed or self.files_changed)

    def pages_added(self) -> List[str]:
        """Best-effort URLs of the added files."""
        return [decode(name) for name in self.files_added]

    def pages_removed(self) -> List[str]:
        return [decode(name) for name in self.files_removed]

    def to_dict(self) -> dict:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def is_html_line(line: str) -> bool:
    """True when *line* holds at least one complete element like ``<p>..</p>``."""
    return bool(_HTML_LINE_RE.search(line))


def html_to_text(line: str) -> str:
    return BeautifulSoup(line, "html.parser").get_text(" ", strip=True)


def _file_names(folder: Path) -> Set[str]:
    return {p.name for p in folder.iterdir() if p.is_file()}


def _read_lines(path: Path) -> List[str]:
    return path.read_text(encoding="utf-8", errors="replace").splitlines()


def _only_in(lines: List[str], other: Set[str]) -> List[str]:
    return list(dict.fromkeys(line for line in lines if line not in other))


def _describe(lines: List[str], file_name: str) -> List[str]:
    described: List[str] = []
    for line in lines:
        if is_html_line(line):
            line = html_to_text(line)
            if not line:
                continue
        described.append(f"[{file_name}]: {line}")
    return described


def _text_changes(original: Path, latest: Path, common: Set[str]) -> Tuple[List[str], List[str], List[str]]:
    added: List[str] = []
    removed: List[str] = []
    changed: List[str] = []
    for name in sorted(common):
        if not name.endswith(TEXT_SUFFIXES):
            continue
        old_lines = _read_lines(original / name)
        new_lines = _read_lines(latest / name)
        gone = _only_in(old_lines, set(new_lines))
        new = _only_in(new_lines, set(old_lines))
        if gone or new:
            changed.append(name)
        removed.extend(_describe(gone, name))
        added.extend(_describe(new, name))
    return added, removed, changed


def compare_folders(original: Union[str, Path], latest: Union[str, Path]) -> ComparisonReport:
    """
    Compare two run directories.

    File names present on one side only are reported as added or removed.
    Text files present on both sides are compared line by line.
    """
    original, latest = Path(original), Path(latest)
    for folder in (original, latest):
        if not folder.is_dir():
            raise FileNotFoundError(f"Folder not found: {folder}")

    logger.info("Comparing %s with %s", original, latest)
    if original.stat().st_mtime > latest.stat().st_mtime:
        logger.warning(
            "%s was modified after %s; added and removed files are reported from %s to %s",
            original.name, latest.name, original.name, latest.name,
        )
    old_names = _file_names(original)
    new_names = _file_names(latest)

    report = ComparisonReport(original=str(original), latest=str(latest))
    report.files_removed = sorted(old_names - new_names)
    report.files_added = sorted(new_names - old_names)
    report.lines_added, report.lines_removed, report.files_changed = _text_changes(
        original, latest, old_names & new_names
    )
    report.complete = True

    for name in report.files_removed:
        logger.info("Removed from [%s]: %s", original.name, name)
    for name in report.files_added:
        logger.info("Added to [%s]: %s", latest.name, name)
    logger.info(
        "Comparison done: %d added, %d removed, %d changed",
        len(report.files_added), len(report.files_removed), len(report.files_changed),
    )
    return report


__all__ = ["ComparisonReport", "compare_folders", "is_html_line", "html_to_text"]
