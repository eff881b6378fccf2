"""Extract background entries from the Chromecast home page source."""

from __future__ import annotations

import re

from .config import Quality
from .models import Background

# Size token the page embeds; rewritten to the requested quality.
LOW_RES_TOKEN = "s1280-w1280-c-h720"

_ENTRY_RE = re.compile(r"\[(http.*?)\]")


def parse_backgrounds(source: str, quality: Quality = Quality.HIGH) -> list[Background]:
    """Parse all the backgrounds from the page source.

    The page embeds its image list as JavaScript string literals with
    ``\\x22``-escaped quotes; those escapes (and any other backslashes) are
    removed before scanning for ``[http..., author, ...]`` tuples.  Tuples
    without an author field are skipped.  Duplicates are kept, in page order.
    """
    source = source.replace("\\x22", "").replace("\\", "")
    backgrounds: list[Background] = []
    for match in _ENTRY_RE.finditer(source):
        fields = match.group(1).rstrip(",").split(",")
        if len(fields) < 2:
            continue
        href = fields[0].strip().replace(LOW_RES_TOKEN, quality.value)
        backgrounds.append(Background(href=href, author=fields[1].strip()))
    return backgrounds
