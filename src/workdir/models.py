"""Data models describing classified directory entries."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FileInfo(BaseModel):
    """Classification result for a single directory entry.

    Attributes:
        filename: Entry name, unique within a listing.
        is_text: Whether the entry is treated as editable text.
        content: Base64 of the normalized bytes; only set for text files
            small enough to load.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filename: str
    is_text: bool = Field(alias="isText")
    content: Optional[str] = None

    @model_validator(mode="after")
    def _binary_has_no_content(self) -> "FileInfo":
        if not self.is_text and self.content is not None:
            raise ValueError("binary entries cannot carry content")
        return self

    @property
    def loaded(self) -> bool:
        """Return True when the text content was read."""
        return self.content is not None

    def payload(self) -> Dict[str, Any]:
        """Return the transport form of this entry, without the filename."""
        return self.model_dump(by_alias=True, exclude={"filename"}, exclude_none=True)


Listing = Dict[str, FileInfo]


def listing_payload(listing: Listing) -> Dict[str, Dict[str, Any]]:
    """Render a listing as ``filename -> {"isText": ..., "content"?: ...}``."""
    return {name: info.payload() for name, info in listing.items()}


__all__ = ["FileInfo", "Listing", "listing_payload"]
