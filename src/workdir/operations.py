"""Thin filesystem operations with no extra policy."""

from __future__ import annotations

import asyncio
import base64
import os
from pathlib import Path
from typing import Tuple

from .mime import MimeTable


async def rename(root: Path, old: str, new: str) -> None:
    """Rename ``old`` to ``new`` within ``root``."""
    await asyncio.to_thread(os.rename, root / old, root / new)


async def delete(root: Path, filename: str) -> None:
    """Remove ``filename`` from ``root``."""
    await asyncio.to_thread(os.unlink, root / filename)


async def read_binary(root: Path, filename: str, mime_table: MimeTable) -> Tuple[str, str]:
    """Return the base64 content of ``filename`` and its MIME type."""
    raw = await asyncio.to_thread((root / filename).read_bytes)
    return base64.b64encode(raw).decode("ascii"), mime_table.lookup(filename)


__all__ = ["rename", "delete", "read_binary"]
