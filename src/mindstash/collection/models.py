"""Asset data models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AssetType(str, Enum):
    """Kinds of content an asset can hold."""

    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    LINK = "LINK"
    TWEET = "TWEET"
    NOTE = "NOTE"
    PDF = "PDF"


class Asset(BaseModel):
    """A normalized unit of collected content.

    Assets are frozen; the collection swaps in updated copies so readers holding
    a query result never observe a half-applied mutation.

    Attributes:
        id: Opaque identifier, unique within a collection.
        type: Asset kind fixed at creation.
        content: Note body for ``NOTE`` assets, otherwise a URL or blob reference.
        title: Optional display label (filename for ingested files).
        thumbnail: Preview image reference, set for videos only.
        metadata: Type-specific attributes; unknown keys are preserved.
        tags: Free-text tags in insertion order.
        added_at: Creation time in epoch milliseconds.
        aspect_ratio: Masonry layout hint chosen at creation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: AssetType
    content: str
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    added_at: int
    aspect_ratio: int


class NoteStyle(BaseModel):
    """Typed view over the note styling keys kept in asset metadata."""

    model_config = ConfigDict(extra="forbid")

    font_family: Literal["sans", "serif"] = "serif"
    font_size: Literal["sm", "md", "lg"] = "md"
    text_align: Literal["left", "center", "right"] = "left"


__all__ = ["Asset", "AssetType", "NoteStyle"]
