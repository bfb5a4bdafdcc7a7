"""Best-effort conversion of text bytes to UTF-8 with LF line endings."""

from __future__ import annotations

import codecs
import logging
import re

import chardet

LOGGER = logging.getLogger(__name__)

CANONICAL_ENCODING = "utf-8"

# A CRLF plus any carriage returns directly before it.
_CRLF_RUN = re.compile(r"\r+\n")

# Encodings whose bytes are already valid UTF-8.
_UTF8_COMPATIBLE = {"utf-8", "ascii"}


def detect_encoding(raw: bytes) -> str | None:
    """Return the encoding chardet guesses for ``raw``, or None."""
    return chardet.detect(raw).get("encoding")


def convert_to_canonical(raw: bytes, encoding: str) -> bytes:
    """Re-encode ``raw`` from ``encoding`` to UTF-8.

    Raises:
        LookupError: If ``encoding`` is not a known codec.
        UnicodeError: If ``raw`` is not valid in ``encoding``.
    """
    if codecs.lookup(encoding).name in _UTF8_COMPATIBLE:
        return raw
    return raw.decode(encoding).encode(CANONICAL_ENCODING)


def normalize_line_endings(data: bytes) -> bytes:
    """Replace every CRLF pair with LF.

    Carriage returns stacked before a CRLF collapse as well, so the result
    never contains CRLF. Bytes that are not valid UTF-8 become U+FFFD.
    """
    text = data.decode(CANONICAL_ENCODING, errors="replace")
    return _CRLF_RUN.sub("\n", text).encode(CANONICAL_ENCODING)


def normalize(raw: bytes) -> bytes:
    """Return ``raw`` as UTF-8 with LF line endings.

    Never raises. When the source encoding cannot be detected or converted, a
    warning is logged and the original bytes go straight to line-ending
    normalization.
    """
    if not raw:
        return raw

    data = raw
    encoding = None
    try:
        encoding = detect_encoding(raw)
        if encoding is None:
            raise LookupError("no encoding detected")
        data = convert_to_canonical(raw, encoding)
    except (LookupError, UnicodeError) as exc:
        LOGGER.warning("Could not convert encoding %s: %s", encoding, exc)

    return normalize_line_endings(data)


__all__ = [
    "CANONICAL_ENCODING",
    "detect_encoding",
    "convert_to_canonical",
    "normalize_line_endings",
    "normalize",
]
