"""CLI entry-point for the Chromecast background downloader."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import HarvesterConfig, Quality
from .downloader import Downloader
from .exceptions import ConfigurationError
from .harvester import Harvester

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )
    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def _print_stats(stats: dict) -> None:
    table = Table(title="Download Summary", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")
    for key, val in stats.items():
        table.add_row(key.capitalize(), str(val))
    console.print(table)


def _load_config(
    settings_file: Path | None,
    outdir: Path | None,
    watermark: bool,
    gradient: bool,
    quality: str,
    workers: int,
    single_poll: bool,
    font: Path | None,
) -> HarvesterConfig:
    if settings_file is not None:
        # The settings file wins; the other switches are ignored.
        return HarvesterConfig.from_settings_file(settings_file, single_poll=single_poll)
    return HarvesterConfig.from_options(
        outdir=outdir,
        watermark=watermark,
        gradient=gradient,
        quality=Quality.from_name(quality),
        max_workers=workers,
        single_poll=single_poll,
        font_path=str(font) if font is not None else None,
    )


@click.command()
@click.option("--settings", "settings_file", type=click.Path(dir_okay=False, path_type=Path),
              help="Load settings from a key=value file (other options are ignored)")
@click.option("--outdir", type=click.Path(file_okay=False, path_type=Path), help="Output directory")
@click.option("--watermark", is_flag=True, help="Apply the author's name as a watermark")
@click.option("--gradient", is_flag=True,
              help="Overlay a gradient (attempts to match the Chromecast's display of images)")
@click.option("--quality", type=click.Choice([q.name.lower() for q in Quality]), default="high",
              show_default=True, help="Image size to request")
@click.option("--workers", default=8, type=click.IntRange(min=1), show_default=True,
              help="Max concurrent downloads")
@click.option("--font", type=click.Path(dir_okay=False, path_type=Path),
              help="TrueType font for the watermark (Pillow's default font otherwise)")
@click.option("--single-poll", is_flag=True, help="Read the home page once instead of polling it repeatedly")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    settings_file: Path | None,
    outdir: Path | None,
    watermark: bool,
    gradient: bool,
    quality: str,
    workers: int,
    font: Path | None,
    single_poll: bool,
    verbose: bool,
) -> None:
    """Download the backgrounds shown on the Chromecast home screen.

    Backgrounds can have a gradient applied, closely mimicking the
    Chromecast's standard display, and a watermark with the photographer's
    name in the bottom right corner.  Images already in the output
    directory are not downloaded again.

    Example: chromecastbg --outdir ~/Pictures/chromecast --watermark --gradient
    """
    _setup_logging(verbose)
    try:
        cfg = _load_config(settings_file, outdir, watermark, gradient, quality, workers, single_poll, font)
        cfg.ensure_save_path()
    except ConfigurationError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}")
        sys.exit(1)

    console.print("[bold]Chromecast Backgrounds[/bold]")
    console.print(f"  Saving to: [cyan]{escape(str(cfg.save_path))}[/cyan]")
    console.print(f"  Adding Gradient: {cfg.transforms.gradient}")
    console.print(f"  Applying Watermark: {cfg.transforms.watermark}")

    with Harvester(cfg) as h:
        with console.status("Searching for backgrounds..."):
            backgrounds = h.discover()
        console.print(f"[green]✓[/green] {len(backgrounds)} found.")

        downloader = Downloader(h.api, max_workers=cfg.max_workers, jpeg_quality=cfg.jpeg_quality)
        report = downloader.run(backgrounds, cfg.save_path, cfg.transforms)

    if report.dispatched == 0:
        console.print("No new images found.")
    for failure in report.failures:
        console.print(f"[red]✗[/red] {escape(failure.background.name)}: {escape(failure.error)}")
    _print_stats(report.stats)
    console.print("Finished.")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
