# sitewatch/crawler/codec.py
"""
Mapping between URLs and the file names used inside a run directory.

``encode`` is a pure function of the URL, so a name can be re-derived later
(for example when two run directories are compared). Distinct URLs may map to
the same name; the later write wins.
"""
from __future__ import annotations

from typing import Final, FrozenSet

SCHEMES: Final = ("https://", "http://")
SLASH_TOKEN: Final[str] = "{FS}"
QUERY_TOKEN: Final[str] = "$"
KNOWN_EXTENSIONS: Final[FrozenSet[str]] = frozenset({"xml", "csv", "css", "plain", "js", "html"})
DEFAULT_EXTENSION: Final[str] = ".txt"
IMAGE_FALLBACK_EXTENSION: Final[str] = ".jfif"


def strip_scheme(url: str) -> str:
    for scheme in SCHEMES:
        if url.startswith(scheme):
            return url[len(scheme):]
    return url


def encode(url: str) -> str:
    """Return a filesystem-safe name for *url*.

    The scheme is removed, ``/`` becomes ``{FS}``, ``?`` becomes ``$`` and
    ``:`` is dropped. Everything else is kept as is.
    """
    out = []
    for ch in strip_scheme(url):
        if ch == "/":
            out.append(SLASH_TOKEN)
        elif ch == "?":
            out.append(QUERY_TOKEN)
        elif ch == ":":
            continue
        else:
            out.append(ch)
    return "".join(out)


def decode(name: str, scheme: str = "https://") -> str:
    """Best-effort inverse of :func:`encode`. Dropped colons are not restored."""
    if name.endswith(DEFAULT_EXTENSION):
        name = name[: -len(DEFAULT_EXTENSION)]
    return scheme + name.replace(SLASH_TOKEN, "/").replace(QUERY_TOKEN, "?")


def _last_segment(url: str) -> str:
    return url.rsplit("/", 1)[-1]


def text_filename(url: str) -> str:
    """Name for a textual resource.

    URLs ending in a known extension keep their last path segment so the
    extension survives; all others get the encoded URL plus ``.txt``.
    """
    extension = url.rsplit(".", 1)[-1]
    if extension in KNOWN_EXTENSIONS:
        return _last_segment(url)
    return encode(url) + DEFAULT_EXTENSION


def binary_filename(url: str, content_type: str) -> str:
    """Name for an image or application resource."""
    name = _last_segment(url) or encode(url)
    if content_type.lower().startswith("image/") and "." not in name:
        name += IMAGE_FALLBACK_EXTENSION
    return name


__all__ = [
    "encode",
    "decode",
    "strip_scheme",
    "text_filename",
    "binary_filename",
    "SLASH_TOKEN",
    "QUERY_TOKEN",
    "KNOWN_EXTENSIONS",
    "DEFAULT_EXTENSION",
    "IMAGE_FALLBACK_EXTENSION",
]
