"""Per-entry text/binary classification."""

from __future__ import annotations

import asyncio
import base64
import logging
import re
from pathlib import Path

from .charset import normalize
from .mime import MimeTable
from .models import FileInfo

LOGGER = logging.getLogger(__name__)

# Hidden files and editor temp files (``octave-<word chars>``).
IGNORED_FILENAME = re.compile(r"^(\..*|octave-\w+)$")


def is_ignored(filename: str) -> bool:
    """Return True when ``filename`` is excluded from listings entirely."""
    return IGNORED_FILENAME.match(filename) is not None


class FileClassifier:
    """Decide whether a directory entry is text, binary, or ignored."""

    def __init__(self, root: Path, mime_table: MimeTable, text_size_limit: int) -> None:
        self.root = root
        self.mime_table = mime_table
        self.text_size_limit = text_size_limit

    async def classify(self, filename: str) -> FileInfo | None:
        """Classify ``filename`` relative to the root.

        Names matching the ignore pattern yield None whatever their type. Text
        files are read and normalized unless they exceed the size limit, in
        which case they are reported as text without content. Everything else
        is reported as binary.

        Raises:
            OSError: If a text file cannot be stat-ed or read.
        """
        if is_ignored(filename):
            return None
        if self.mime_table.is_text(filename):
            return await self._classify_text(filename)
        return FileInfo(filename=filename, is_text=False)

    async def _classify_text(self, filename: str) -> FileInfo:
        path = self.root / filename
        stat = await asyncio.to_thread(path.stat)
        if stat.st_size > self.text_size_limit:
            LOGGER.debug("Skipping text file that is too big: %d %s", stat.st_size, filename)
            return FileInfo(filename=filename, is_text=True)

        raw = await asyncio.to_thread(path.read_bytes)
        normalized = await asyncio.to_thread(normalize, raw)
        content = base64.b64encode(normalized).decode("ascii")
        return FileInfo(filename=filename, is_text=True, content=content)


__all__ = ["IGNORED_FILENAME", "FileClassifier", "is_ignored"]
