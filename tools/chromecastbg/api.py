"""Chromecast home page client – plain HTTP fetcher for the page and its images."""

from __future__ import annotations

import logging

import httpx

from .config import ChromecastConfig

logger = logging.getLogger("chromecastbg.api")


class ChromecastAPI:
    """Thin wrapper around the Chromecast home page and the image CDN.

    No caching, throttling or retries: every call is a fresh request and
    errors propagate as ``httpx.HTTPError``.
    """

    def __init__(self, cfg: ChromecastConfig | None = None, *, transport: httpx.BaseTransport | None = None) -> None:
        self.cfg = cfg or ChromecastConfig()
        self._client = httpx.Client(
            timeout=self.cfg.timeout,
            headers={"User-Agent": self.cfg.user_agent},
            follow_redirects=True,
            transport=transport,
        )

    def _get(self, url: str) -> httpx.Response:
        resp = self._client.get(url)
        resp.raise_for_status()
        return resp

    # ── public API ───────────────────────────────────────────────

    def get_page_source(self) -> str:
        """Fetch the source of the Chromecast home page (fairly small)."""
        resp = self._get(self.cfg.page_url)
        logger.debug("Fetched %s (%d bytes)", self.cfg.page_url, len(resp.content))
        return resp.text

    def download_image(self, url: str) -> bytes:
        """Download the raw bytes of a background image."""
        return self._get(url).content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ChromecastAPI:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
