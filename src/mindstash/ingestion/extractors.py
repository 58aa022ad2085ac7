"""Conversion of file handles into assets."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from mindstash.collection.models import Asset, AssetType

from .models import FileHandle, now_ms

LOGGER = logging.getLogger(__name__)

ASPECT_RATIOS = (300, 400, 250)
PDF_MIME_TYPE = "application/pdf"


def file_asset_id(timestamp: int, sequence: int, name: str) -> str:
    """Return an asset id unique within a batch even when timestamps collide."""
    return f"{timestamp}-{sequence}-{name}"


def aspect_ratio_for(name: str, size: int) -> int:
    """Pick a layout hint from the fixed set, varied by name length and size."""
    return ASPECT_RATIOS[(len(name) + size) % len(ASPECT_RATIOS)]


class FileAssetBuilder:
    """Classify a file by MIME type and build the matching asset.

    Images and PDFs keep a reference to their bytes, text files are read in
    full, and everything else becomes an empty note. A failed or timed-out
    read also yields an empty note so one bad file never aborts a batch.
    """

    def __init__(
        self,
        *,
        item_timeout_seconds: Optional[float] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.item_timeout_seconds = item_timeout_seconds
        self.clock = clock

    async def build(self, handle: FileHandle, sequence: int) -> Asset:
        """Create the asset for ``handle``.

        Args:
            handle: File to convert.
            sequence: Position of the file within the ingestion session.

        Returns:
            Asset: New asset titled after the file.
        """
        try:
            asset_type, content = await self._classify(handle)
        except asyncio.TimeoutError:
            LOGGER.warning(
                "Timed out reading %s after %ss; storing an empty note.",
                handle.name,
                self.item_timeout_seconds,
            )
            asset_type, content = AssetType.NOTE, ""
        except Exception as exc:
            LOGGER.warning("Could not read %s (%s); storing an empty note.", handle.name, exc)
            asset_type, content = AssetType.NOTE, ""

        timestamp = self.clock()
        return Asset(
            id=file_asset_id(timestamp, sequence, handle.name),
            type=asset_type,
            content=content,
            title=handle.name,
            metadata={"mime_type": handle.mime_type, "file_size": handle.size},
            tags=[],
            added_at=timestamp,
            aspect_ratio=aspect_ratio_for(handle.name, handle.size),
        )

    async def _classify(self, handle: FileHandle) -> tuple[AssetType, str]:
        mime = handle.mime_type
        if mime.startswith("image/"):
            return AssetType.IMAGE, handle.reference()
        if mime == PDF_MIME_TYPE:
            return AssetType.PDF, handle.reference()
        if mime.startswith("text/"):
            text = await asyncio.wait_for(handle.read_text(), timeout=self.item_timeout_seconds)
            return AssetType.NOTE, text
        return AssetType.NOTE, ""


__all__ = ["ASPECT_RATIOS", "FileAssetBuilder", "aspect_ratio_for", "file_asset_id"]
