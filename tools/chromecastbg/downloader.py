"""Concurrent download → transform → save pipeline for new backgrounds."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from . import images
from .api import ChromecastAPI
from .config import TransformOptions
from .models import Background
from .storage import DiskStorage

logger = logging.getLogger("chromecastbg.downloader")


@dataclass(frozen=True)
class DownloadFailure:
    background: Background
    error: str


@dataclass
class DownloadReport:
    """Outcome of one :meth:`Downloader.run`."""

    skipped: int = 0
    succeeded: list[Path] = field(default_factory=list)
    failures: list[DownloadFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def dispatched(self) -> int:
        return len(self.succeeded) + len(self.failures)

    @property
    def total(self) -> int:
        return self.skipped + self.dispatched

    @property
    def stats(self) -> dict[str, int]:
        return {
            "found": self.total,
            "new": self.dispatched,
            "skipped": self.skipped,
            "downloaded": len(self.succeeded),
            "failed": self.failed,
        }


class Downloader:
    """Fetches, optionally transforms, and saves every background not yet on disk.

    Work is spread over a thread pool of at most ``max_workers`` threads.
    One failing image never stops the others; its error is recorded in the
    report instead.
    """

    def __init__(self, api: ChromecastAPI, *, max_workers: int = 8, jpeg_quality: int = 95) -> None:
        self.api = api
        self.max_workers = max_workers
        self.jpeg_quality = jpeg_quality

    def _process(self, background: Background, storage: DiskStorage, options: TransformOptions) -> Path:
        data = self.api.download_image(background.href)
        image = images.decode(data)
        if options.gradient:
            image = images.overlay_gradient(image)
        if options.watermark:
            image = images.apply_watermark(image, background.author, options.font_path)
        return storage.save(background, images.encode_jpeg(image, self.jpeg_quality))

    def run(
        self,
        backgrounds: Iterable[Background],
        output_dir: Path,
        options: TransformOptions | None = None,
    ) -> DownloadReport:
        """Download every background missing from ``output_dir``.

        Returns only once all dispatched downloads have finished, successfully
        or not.
        """
        options = options or TransformOptions()
        storage = DiskStorage(output_dir)
        # Created once here, never by the worker threads.
        storage.ensure_dir()

        report = DownloadReport()
        pending: list[Background] = []
        for bg in backgrounds:
            if storage.exists(bg):
                logger.debug("%s already downloaded, skipping", bg.name)
                report.skipped += 1
                continue
            logger.info("Downloading new image '%s'", bg.name)
            pending.append(bg)

        if not pending:
            return report

        workers = min(self.max_workers, len(pending))
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
        ) as progress, ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chromecastbg") as pool:
            task = progress.add_task("Downloading", total=len(pending))
            futures = {pool.submit(self._process, bg, storage, options): bg for bg in pending}
            for future in as_completed(futures):
                bg = futures[future]
                try:
                    report.succeeded.append(future.result())
                except Exception as exc:
                    logger.error("Error downloading %s: %s", bg.href, exc)
                    report.failures.append(DownloadFailure(bg, f"{type(exc).__name__}: {exc}"))
                progress.advance(task)

        logger.info(
            "Download complete: %d saved, %d failed, %d skipped",
            len(report.succeeded), report.failed, report.skipped,
        )
        return report
