"""Background discovery – poll the Chromecast home page and collect unique entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import httpx

from .api import ChromecastAPI
from .config import HarvesterConfig
from .models import Background
from .parser import parse_backgrounds

logger = logging.getLogger("chromecastbg.core")


class WorkingSet:
    """Deduplicated backgrounds in order of first discovery."""

    def __init__(self, backgrounds: Iterable[Background] = ()) -> None:
        self._items: dict[Background, None] = {}
        for bg in backgrounds:
            self.add(bg)

    def add(self, background: Background) -> bool:
        """Add ``background`` unless an equal one is present. Returns True if added."""
        if background in self._items:
            return False
        self._items[background] = None
        return True

    def __contains__(self, background: object) -> bool:
        return background in self._items

    def __iter__(self) -> Iterator[Background]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"WorkingSet({list(self._items)!r})"


class Harvester:
    """Discovers the backgrounds currently listed on the Chromecast home page."""

    def __init__(self, cfg: HarvesterConfig | None = None, api: ChromecastAPI | None = None) -> None:
        self.cfg = cfg or HarvesterConfig()
        self._owns_api = api is None
        self.api = api or ChromecastAPI(self.cfg.chromecast)
        # Stats
        self.stats = {"polls": 0, "empty": 0, "errors": 0}

    def discover_once(self) -> list[Background]:
        """Fetch and parse the page once.

        A failed fetch is logged and yields an empty batch.
        """
        self.stats["polls"] += 1
        try:
            source = self.api.get_page_source()
        except httpx.HTTPError as exc:
            logger.warning("Fetching %s failed: %s", self.cfg.chromecast.page_url, exc)
            self.stats["errors"] += 1
            return []
        return parse_backgrounds(source, self.cfg.chromecast.quality)

    def discover_all(self) -> WorkingSet:
        """Poll the page repeatedly, collecting every distinct background.

        The page only lists a subset of the backgrounds on each request, so it
        is fetched up to ``max_polls`` times.  Polling ends early once more
        than ``empty_threshold`` polls have returned nothing; the count of
        empty polls is cumulative and never reset.  Coverage is best effort.
        """
        cc = self.cfg.chromecast
        working = WorkingSet()
        iterations = 0
        empty_polls = 0

        while iterations < cc.max_polls and empty_polls <= cc.empty_threshold:
            batch = self.discover_once()
            if not batch:
                empty_polls += 1
                self.stats["empty"] += 1
            else:
                added = sum(working.add(bg) for bg in batch)
                logger.debug("Poll %d: %d parsed, %d new", iterations + 1, len(batch), added)
            iterations += 1

        logger.info("Discovery finished after %d polls: %d unique backgrounds", iterations, len(working))
        return working

    def discover(self) -> WorkingSet:
        """Single poll or full discovery, depending on ``single_poll``."""
        if self.cfg.single_poll:
            return WorkingSet(self.discover_once())
        return self.discover_all()

    # ── lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        if self._owns_api:
            self.api.close()

    def __enter__(self) -> Harvester:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
