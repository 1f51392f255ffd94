# File: sitewatch/utils.py
"""sitewatch.utils: small path and URL helpers shared across the package."""

from __future__ import annotations

from pathlib import Path
from typing import Collection, List, Sequence, Union

from sitewatch.logger import logger

__all__: Sequence[str] = (
    "resolve_path",
    "remove_duplicates",
)


def resolve_path(path: Union[str, Path], base: Union[str, Path, None] = None) -> Path:
    """Expand `~`, try *base* for relative paths, check existence and return a Path."""
    p = Path(path).expanduser()
    if not p.is_absolute() and base is not None and not p.exists():
        p = Path(base).expanduser() / p
    if not p.exists():
        logger.error("Path not found: %s", p)
        raise FileNotFoundError(f"Path not found: {p}")
    return p


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Remove duplicate URLs while keeping the first-seen order."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
