"""Background entries discovered on the Chromecast home page."""

from __future__ import annotations

import hashlib
import posixpath
from dataclasses import dataclass
from urllib.parse import urlsplit

from pathvalidate import sanitize_filename

IMAGE_EXT = ".jpg"

# Percent-encoded fragments stripped from file names, in this order.
_NAME_ARTIFACTS = ("%2B", "%2")


def canonical_name(href: str) -> str:
    """Derive the on-disk file name for an image URL.

    The base name of the URL path (without its extension) is stripped of
    ``%2B``/``%2`` artifacts, sanitized, and given a ``.jpg`` suffix.  URLs
    whose path yields nothing usable fall back to a hash of the URL.
    """
    stem, _ = posixpath.splitext(posixpath.basename(urlsplit(href).path))
    for artifact in _NAME_ARTIFACTS:
        stem = stem.replace(artifact, "")
    stem = sanitize_filename(stem, max_len=255 - len(IMAGE_EXT)).strip()
    if not stem:
        stem = hashlib.sha256(href.encode("utf-8")).hexdigest()[:16]
    return stem + IMAGE_EXT


@dataclass(frozen=True)
class Background:
    href: str
    author: str

    @property
    def name(self) -> str:
        return canonical_name(self.href)
