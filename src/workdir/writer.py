"""Single-file overwrite with an in-memory backup and best-effort rollback."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .errors import SaveError

LOGGER = logging.getLogger(__name__)


class SafeFileWriter:
    """Overwrite files under ``root``, restoring the old bytes if the write fails.

    No locking is performed: concurrent saves to the same name race.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    async def save(self, filename: str, content: bytes) -> None:
        """Replace the content of ``filename`` with ``content``.

        A missing file is created. When the write fails, the previous bytes are
        written back before the failure is reported.

        Raises:
            OSError: If an existing file cannot be read for the backup.
            SaveError: If the write fails. ``SaveError.error`` is the write
                failure; ``restored`` tells whether the rollback succeeded.
        """
        path = self.root / filename
        backup = await self._read_backup(path, filename)

        try:
            await asyncio.to_thread(path.write_bytes, content)
        except OSError as exc:
            error = await self._restore(path, filename, backup, exc)
            raise error from exc

    async def _read_backup(self, path: Path, filename: str) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            LOGGER.info("Creating new file: %s", filename)
            return b""

    async def _restore(self, path: Path, filename: str, backup: bytes, error: OSError) -> SaveError:
        LOGGER.warning("Write to %s failed, restoring backup: %s", filename, error)
        try:
            await asyncio.to_thread(path.write_bytes, backup)
        except OSError as restore_exc:
            LOGGER.error("Could not restore %s after failed write: %s", filename, restore_exc)
            return SaveError(filename, error, restored=False, restore_error=restore_exc)
        return SaveError(filename, error, restored=True)


__all__ = ["SafeFileWriter"]
