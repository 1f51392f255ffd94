# sitewatch/crawler/persister.py
"""
Writes fetched resources into the run directory.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from sitewatch.crawler.models import SaveOutcome

logger = logging.getLogger("SiteWatch")


def save(content: Union[str, bytes], name: str, output_dir: Union[str, Path]) -> SaveOutcome:
    """
    Write *content* to ``output_dir / name``, replacing any existing file.

    Text is written as UTF-8, bytes as is. I/O errors are logged and returned
    as a failed :class:`SaveOutcome` instead of being raised.
    """
    path = Path(output_dir) / name
    try:
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.error("Could not save %s: %s", path, exc)
        return SaveOutcome(ok=False, path=path, error=str(exc))
    logger.debug("Saved %s", path)
    return SaveOutcome(ok=True, path=path)


__all__ = ["save"]
