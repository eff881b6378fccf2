"""Configuration and settings-file loading for the background downloader."""

from __future__ import annotations

import configparser
import enum
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

import platformdirs

from .exceptions import ConfigurationError

logger = logging.getLogger("chromecastbg.config")

APP_NAME = "chromecastbg"
SETTINGS_SECTION = "settings"


class Quality(str, enum.Enum):
    """Size tokens understood by the image CDN.

    They may not actually be 2560px, 1920px and 720px, but that's what the
    URL wants.
    """

    HIGH = "s2560"
    MEDIUM = "s1920"
    LOW = "s720"

    @classmethod
    def from_name(cls, name: str) -> Quality:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(q.name.lower() for q in cls)
            raise ConfigurationError(
                f"Unknown quality {name!r} (expected one of: {choices})"
            ) from None


def default_save_path() -> Path:
    """Per-user application data directory (AppData, Application Support, XDG)."""
    return Path(platformdirs.user_data_dir(APP_NAME, appauthor=False, roaming=True))


@dataclass(frozen=True)
class ChromecastConfig:
    """Chromecast home page configuration."""
    page_url: str = "https://clients3.google.com/cast/chromecast/home/v/c9541b08"
    quality: Quality = Quality.HIGH
    max_polls: int = 30
    empty_threshold: int = 5  # polling stops once more empty polls than this were seen
    timeout: float = 30.0
    user_agent: str = "chromecastbg/1.0"


@dataclass(frozen=True)
class TransformOptions:
    gradient: bool = False
    watermark: bool = False
    font_path: str | None = None


@dataclass(frozen=True)
class HarvesterConfig:
    save_path: Path = field(default_factory=default_save_path)
    transforms: TransformOptions = field(default_factory=TransformOptions)
    chromecast: ChromecastConfig = field(default_factory=ChromecastConfig)
    max_workers: int = 8
    jpeg_quality: int = 95
    single_poll: bool = False

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ConfigurationError(f"Workers must be at least 1, got {self.max_workers}")
        if not 1 <= self.jpeg_quality <= 100:
            raise ConfigurationError(f"JPEG quality must be in 1-100, got {self.jpeg_quality}")
        if self.save_path.exists() and not self.save_path.is_dir():
            raise ConfigurationError(f"Save path '{self.save_path}' exists and is not a directory")

    def ensure_save_path(self) -> None:
        """Create the save directory, reporting failures as configuration errors."""
        try:
            self.save_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"Cannot create save path '{self.save_path}': {exc}") from exc

    @classmethod
    def from_options(
        cls,
        *,
        outdir: str | Path | None = None,
        watermark: bool = False,
        gradient: bool = False,
        quality: Quality = Quality.HIGH,
        max_workers: int = 8,
        single_poll: bool = False,
        font_path: str | None = None,
    ) -> HarvesterConfig:
        """Build a config from command-line switches; unset values keep their defaults."""
        kwargs: dict[str, object] = {}
        if outdir is not None:
            kwargs["save_path"] = Path(outdir).expanduser()
        return cls(
            transforms=TransformOptions(gradient=gradient, watermark=watermark, font_path=font_path),
            chromecast=ChromecastConfig(quality=quality),
            max_workers=max_workers,
            single_poll=single_poll,
            **kwargs,  # type: ignore[arg-type]
        )

    @classmethod
    def from_settings_file(cls, path: str | Path, *, single_poll: bool = False) -> HarvesterConfig:
        """Load settings from a ``key=value`` file.

        Recognised keys: ``ApplyGradient``, ``ApplyWatermark``, ``SaveTo``,
        ``Quality``, ``Workers`` and ``WatermarkFont``.  Missing keys keep their
        defaults.

        Raises:
            ConfigurationError: if the file cannot be read or a value is invalid.
        """
        path = Path(path)
        values = read_settings_file(path)
        defaults = cls()
        transforms = defaults.transforms
        chromecast = defaults.chromecast
        save_path = defaults.save_path
        max_workers = defaults.max_workers

        for key, value in values.items():
            if key == "ApplyGradient":
                transforms = replace(transforms, gradient=_parse_bool(key, value))
            elif key == "ApplyWatermark":
                transforms = replace(transforms, watermark=_parse_bool(key, value))
            elif key == "SaveTo":
                if not value.strip():
                    raise ConfigurationError("SaveTo must not be empty")
                save_path = Path(value.strip()).expanduser()
            elif key == "Quality":
                chromecast = replace(chromecast, quality=Quality.from_name(value))
            elif key == "Workers":
                max_workers = _parse_int(key, value)
            elif key == "WatermarkFont":
                transforms = replace(transforms, font_path=value.strip() or None)
            else:
                logger.warning("Ignoring unknown setting %r in %s", key, path)

        return cls(
            save_path=save_path,
            transforms=transforms,
            chromecast=chromecast,
            max_workers=max_workers,
            single_poll=single_poll,
        )


def read_settings_file(path: Path) -> dict[str, str]:
    """Parse a properties-style file (no section headers) into a dict."""
    parser = configparser.ConfigParser(interpolation=None, delimiters=("=", ":"))
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read settings file '{path}': {exc}") from exc
    try:
        parser.read_string(f"[{SETTINGS_SECTION}]\n{text}", source=str(path))
    except configparser.Error as exc:
        raise ConfigurationError(f"Error parsing settings file '{path}': {exc}") from exc
    return dict(parser[SETTINGS_SECTION])


def _parse_bool(key: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise ConfigurationError(f"{key} must be 'true' or 'false', got {value!r}")


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None
