"""Exceptions raised by working-directory operations."""

from __future__ import annotations


class WorkdirError(Exception):
    """Base exception for working-directory operations."""


class SaveError(WorkdirError):
    """Raised when overwriting a file fails.

    Attributes:
        filename: Name of the file that could not be written.
        error: The original write failure.
        restored: Whether the previous content was written back.
        restore_error: Failure raised while restoring, if any.
    """

    def __init__(
        self,
        filename: str,
        error: OSError,
        *,
        restored: bool,
        restore_error: OSError | None = None,
    ) -> None:
        state = "previous content restored" if restored else "restore failed"
        super().__init__(f"Could not save {filename}: {error} ({state})")
        self.filename = filename
        self.error = error
        self.restored = restored
        self.restore_error = restore_error


__all__ = ["WorkdirError", "SaveError"]
