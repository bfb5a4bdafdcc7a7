"""The per-session working-directory context."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from . import operations
from .classifier import FileClassifier
from .config import WorkdirConfig
from .mime import MimeTable, load_mime_table, mime_table_from_settings
from .models import FileInfo, Listing
from .scanner import DirectoryScanner
from .writer import SafeFileWriter


@dataclass(frozen=True, slots=True)
class WorkingDirectory:
    """Immutable context for all operations against one directory.

    Filenames passed to the operations are resolved relative to ``root``.
    Nothing is cached between calls; each operation re-reads the filesystem.

    Attributes:
        root: Absolute path of the directory.
        text_size_limit: Largest text file, in bytes, whose content is loaded.
        max_concurrency: Maximum number of entries classified at once.
        mime_table: Lookup used to decide which files are text.
    """

    root: Path
    text_size_limit: int
    max_concurrency: int = 32
    mime_table: MimeTable = field(default_factory=load_mime_table)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root).expanduser().resolve())

    @classmethod
    def from_config(cls, root: Path | str, config: WorkdirConfig) -> "WorkingDirectory":
        """Build a context using the limits and MIME supplements in ``config``."""
        return cls(
            root=Path(root),
            text_size_limit=config.session.text_file_size_limit,
            max_concurrency=config.session.max_concurrency,
            mime_table=mime_table_from_settings(config.mime),
        )

    @property
    def classifier(self) -> FileClassifier:
        """Return a classifier bound to this directory's root, table, and limit."""
        return FileClassifier(self.root, self.mime_table, self.text_size_limit)

    async def list_all(self) -> Listing:
        """Classify every entry of the directory; ignored entries are omitted."""
        return await DirectoryScanner(self.classifier, self.max_concurrency).list_all()

    async def get_file_info(self, filename: str) -> FileInfo | None:
        """Classify a single entry; None means the entry is ignored."""
        return await self.classifier.classify(filename)

    async def save_file(self, filename: str, content: bytes) -> None:
        """Overwrite ``filename`` with rollback on failure; see :class:`SafeFileWriter`."""
        await SafeFileWriter(self.root).save(filename, content)

    async def rename_file(self, old: str, new: str) -> None:
        """Rename ``old`` to ``new`` inside the directory."""
        await operations.rename(self.root, old, new)

    async def delete_file(self, filename: str) -> None:
        """Remove ``filename`` from the directory."""
        await operations.delete(self.root, filename)

    async def read_binary(self, filename: str) -> Tuple[str, str]:
        """Return ``(base64 content, MIME type)`` for ``filename``."""
        return await operations.read_binary(self.root, filename, self.mime_table)


__all__ = ["WorkingDirectory"]
