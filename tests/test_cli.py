"""End-to-end tests for the command-line interface."""

from __future__ import annotations

import httpx
import pytest
from click.testing import CliRunner

from chromecastbg import harvester as harvester_mod
from chromecastbg import images
from chromecastbg.api import ChromecastAPI
from chromecastbg.cli import cli

from .helpers import CDN, make_jpeg, make_page

runner = CliRunner()

PAGE = make_page([(f"{CDN}/s1280-w1280-c-h720/Alps.jpg", "Ann"), (f"{CDN}/s1280-w1280-c-h720/Oslo.jpg", "Bob")])


@pytest.fixture
def requests_seen(monkeypatch) -> list[str]:
    """Route every ChromecastAPI built by the CLI through a mock transport."""
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if request.url.host == "clients3.google.com":
            return httpx.Response(200, text=PAGE)
        return httpx.Response(200, content=make_jpeg())

    def _api(cfg):
        return ChromecastAPI(cfg, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(harvester_mod, "ChromecastAPI", _api)
    return seen


def test_downloads_into_outdir(tmp_path, requests_seen):
    out = tmp_path / "out"

    result = runner.invoke(cli, ["--outdir", str(out), "--single-poll"])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out.iterdir()) == ["Alps.jpg", "Oslo.jpg"]
    assert f"{CDN}/s2560/Alps.jpg" in requests_seen
    assert "2 found" in result.output
    assert "Finished." in result.output


def test_second_run_reports_nothing_new(tmp_path, requests_seen):
    out = tmp_path / "out"
    runner.invoke(cli, ["--outdir", str(out), "--single-poll"])
    requests_seen.clear()

    result = runner.invoke(cli, ["--outdir", str(out), "--single-poll"])

    assert result.exit_code == 0, result.output
    assert "No new images found." in result.output
    assert all("googleusercontent" not in url for url in requests_seen)


def test_quality_option(tmp_path, requests_seen):
    result = runner.invoke(cli, ["--outdir", str(tmp_path), "--single-poll", "--quality", "low"])

    assert result.exit_code == 0, result.output
    assert f"{CDN}/s720/Alps.jpg" in requests_seen


def test_settings_file_overrides_other_flags(tmp_path, requests_seen):
    saved = tmp_path / "saved"
    ignored = tmp_path / "ignored"
    settings = tmp_path / "settings.cfg"
    settings.write_text(f"ApplyGradient=true\nSaveTo={saved}\n", encoding="utf-8")

    result = runner.invoke(cli, ["--settings", str(settings), "--outdir", str(ignored), "--single-poll"])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in saved.iterdir()) == ["Alps.jpg", "Oslo.jpg"]
    assert not ignored.exists()
    assert "Adding Gradient: True" in result.output


def test_invalid_settings_file_is_fatal_before_network(tmp_path, requests_seen):
    settings = tmp_path / "settings.cfg"
    settings.write_text("ApplyWatermark=maybe\n", encoding="utf-8")

    result = runner.invoke(cli, ["--settings", str(settings)])

    assert result.exit_code == 1
    assert "ApplyWatermark" in result.output
    assert requests_seen == []


def test_missing_settings_file_is_fatal(tmp_path, requests_seen):
    result = runner.invoke(cli, ["--settings", str(tmp_path / "nope.cfg")])

    assert result.exit_code == 1
    assert "Cannot read settings file" in result.output
    assert requests_seen == []


def test_invalid_arguments_are_rejected(tmp_path, requests_seen):
    result = runner.invoke(cli, ["--workers", "0", "--outdir", str(tmp_path)])

    assert result.exit_code == 2
    assert requests_seen == []


def test_save_path_that_is_a_file_is_fatal_before_network(tmp_path, requests_seen):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    settings = tmp_path / "settings.cfg"
    settings.write_text(f"SaveTo={blocker}\n", encoding="utf-8")

    result = runner.invoke(cli, ["--settings", str(settings)])

    assert result.exit_code == 1
    assert "not a directory" in result.output
    assert requests_seen == []


def test_uncreatable_save_path_is_fatal_before_network(tmp_path, requests_seen):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    settings = tmp_path / "settings.cfg"
    settings.write_text(f"SaveTo={blocker / 'sub'}\n", encoding="utf-8")

    result = runner.invoke(cli, ["--settings", str(settings)])

    assert result.exit_code == 1
    assert "Cannot create save path" in result.output
    assert requests_seen == []


def test_font_option_reaches_watermark(tmp_path, requests_seen, monkeypatch):
    fonts: list[str | None] = []
    real_load_font = images.load_font

    def _record(font_path=None, size=images.WATERMARK_FONT_SIZE):
        fonts.append(font_path)
        return real_load_font(None, size)

    monkeypatch.setattr(images, "load_font", _record)
    font = tmp_path / "OpenSans-Regular.ttf"

    result = runner.invoke(
        cli, ["--outdir", str(tmp_path / "out"), "--single-poll", "--watermark", "--font", str(font)]
    )

    assert result.exit_code == 0, result.output
    assert fonts == [str(font), str(font)]
