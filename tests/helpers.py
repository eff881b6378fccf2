"""Builders for synthetic home page sources and images used across tests."""

from __future__ import annotations

import io
from collections.abc import Iterable

from PIL import Image

CDN = "https://lh3.googleusercontent.com/-abc/XYZ"


def make_page(entries: Iterable[tuple[str, str]]) -> str:
    """Render entries the way the home page embeds them: ``\\x22``-quoted JS literals."""
    rows = ",".join(
        rf"[\x22{href}\x22,\x22{author}\x22,null,\x22https://plus.example/{i}\x22]"
        for i, (href, author) in enumerate(entries)
    )
    return f"<script>window.CHROMECAST_DATA = JSON.parse('[{rows}]');</script>"


def make_jpeg(size: tuple[int, int] = (200, 120), color: tuple[int, int, int] = (200, 200, 200)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="JPEG")
    return buf.getvalue()
