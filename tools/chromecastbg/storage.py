"""Disk storage layer – decide what is already downloaded and write new images."""

from __future__ import annotations

import logging
import os
import uuid
from contextlib import suppress
from pathlib import Path

from .models import Background

logger = logging.getLogger("chromecastbg.storage")


def is_materialized(background: Background, output_dir: Path) -> bool:
    """True if ``background`` already has a file in ``output_dir``."""
    return (Path(output_dir) / background.name).exists()


class DiskStorage:
    """Store background images as flat files in one directory."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def ensure_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, background: Background) -> Path:
        return self.output_dir / background.name

    def exists(self, background: Background) -> bool:
        return is_materialized(background, self.output_dir)

    def save(self, background: Background, data: bytes) -> Path:
        """Atomically write ``data`` as the file for ``background``.

        Bytes go to a uniquely named temp file in the same directory which is
        then moved into place; a failed write leaves nothing at the final path.
        """
        path = self.path_for(background)
        temp_path = path.with_name(f"{path.name}.part.{uuid.uuid4().hex}")
        try:
            temp_path.write_bytes(data)
            os.replace(temp_path, path)
        except Exception:
            with suppress(FileNotFoundError):
                temp_path.unlink()
            raise
        logger.debug("Saved %s (%d bytes)", path, len(data))
        return path
