"""File-system source reader for commented-out code checks."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileSourceReader:
    """Reads component source files relative to a project root.

    Texts are cached per path for the lifetime of the reader. Missing or
    unreadable files read as None.
    """

    def __init__(self, base_path: Path | str, encoding: str = "utf-8") -> None:
        self._base_path = Path(base_path)
        self._encoding = encoding
        self._texts: dict[str, str | None] = {}

    @property
    def base_path(self) -> Path:
        return self._base_path

    def read(self, source_file: str) -> str | None:
        """Source text, or None if the file is missing or unreadable."""
        if source_file in self._texts:
            return self._texts[source_file]

        path = self._base_path / source_file
        text: str | None
        if not path.is_file():
            logger.debug("Source file not found: %s", path)
            text = None
        else:
            try:
                text = path.read_text(encoding=self._encoding)
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Cannot read %s: %s", path, exc)
                text = None

        self._texts[source_file] = text
        return text
