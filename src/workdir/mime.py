"""Filename to MIME type lookup.

The table is assembled once by :func:`load_mime_table` from the interpreter's
``mimetypes`` database, the ``mime.types`` file bundled with this package, an
optional user-supplied ``mime.types`` file, and inline overrides, in that
order. The resulting :class:`MimeTable` is immutable and is handed to the
classifier explicitly instead of mutating process-wide state.
"""

from __future__ import annotations

import logging
import mimetypes
import re
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from .config import ConfigError, MimeSettings

LOGGER = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"
BUNDLED_TYPES_FILE = Path(__file__).parent / "data" / "mime.types"

_TEXT_MIME = re.compile(r"^text/.*$")


def is_text_type(mime_type: str) -> bool:
    """Return True for MIME types in the ``text/*`` family."""
    return bool(_TEXT_MIME.match(mime_type))


def extension_of(filename: str) -> str:
    """Return the lookup key for ``filename``.

    This is the lower-cased text after the last dot, or the whole name when it
    has no dot (so extension-less names such as ``Makefile`` can be registered).
    """
    name = re.split(r"[/\\]", filename)[-1]
    return name.rsplit(".", 1)[-1].lower()


class MimeTable:
    """Immutable extension to MIME type mapping."""

    def __init__(self, types: Mapping[str, str], default: str = DEFAULT_MIME_TYPE) -> None:
        self._types = MappingProxyType({_clean_ext(ext): mime for ext, mime in types.items()})
        self._default = default

    @property
    def types(self) -> Mapping[str, str]:
        """Return a read-only view of the registered extensions."""
        return self._types

    def lookup(self, filename: str) -> str:
        """Return the MIME type for ``filename``, or the default when unknown."""
        return self._types.get(extension_of(filename), self._default)

    def is_text(self, filename: str) -> bool:
        """Return True when ``filename`` maps to a ``text/*`` type."""
        return is_text_type(self.lookup(filename))

    def __len__(self) -> int:
        return len(self._types)


def parse_types_file(lines: Iterable[str]) -> dict[str, str]:
    """Parse ``mime.types`` formatted lines into an extension mapping."""
    types: dict[str, str] = {}
    for line in lines:
        fields = line.split("#", 1)[0].split()
        if len(fields) < 2:
            continue
        mime_type, *extensions = fields
        for ext in extensions:
            types[_clean_ext(ext)] = mime_type
    return types


def load_mime_table(
    types_file: str | Path | None = None,
    extra: Mapping[str, str] | None = None,
) -> MimeTable:
    """Build a :class:`MimeTable` from builtin defaults and supplements.

    Args:
        types_file: Optional ``mime.types`` file layered over the defaults.
        extra: Inline extension to MIME type overrides, applied last.

    Raises:
        ConfigError: If ``types_file`` cannot be read.
    """
    builtin = mimetypes.MimeTypes()
    types: dict[str, str] = {}
    # Non-strict entries first so the strict (standard) ones win on conflicts.
    for table in builtin.types_map:
        types.update({_clean_ext(ext): mime for ext, mime in table.items()})

    types.update(parse_types_file(BUNDLED_TYPES_FILE.read_text(encoding="utf-8").splitlines()))

    if types_file is not None:
        path = Path(types_file).expanduser()
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise ConfigError(f"Unable to read MIME types file {path}: {exc}") from exc
        supplemental = parse_types_file(lines)
        LOGGER.debug("Loaded %d MIME types from %s", len(supplemental), path)
        types.update(supplemental)

    if extra:
        types.update({_clean_ext(ext): mime for ext, mime in extra.items()})

    return MimeTable(types)


def mime_table_from_settings(settings: MimeSettings) -> MimeTable:
    """Build the table described by the ``mime`` configuration section."""
    return load_mime_table(settings.types_file, settings.extra_types)


def _clean_ext(ext: str) -> str:
    return ext.lstrip(".").lower()


__all__ = [
    "DEFAULT_MIME_TYPE",
    "MimeTable",
    "extension_of",
    "is_text_type",
    "load_mime_table",
    "mime_table_from_settings",
    "parse_types_file",
]
