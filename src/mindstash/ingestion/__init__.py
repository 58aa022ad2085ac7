"""Ingestion pipeline: traversal, file conversion and chunked sessions."""

from .discovery import EntryTraverser
from .errors import IngestionBusyError, IngestionError
from .extractors import FileAssetBuilder
from .models import (
    CancellationToken,
    DropEntry,
    DropItem,
    DropPayload,
    FileHandle,
    IngestionComplete,
    IngestionEvent,
    IngestionStatus,
    LocalEntry,
    LocalFile,
    ProgressEvent,
)
from .pipeline import IngestionSession
from .text import asset_from_text, new_note

__all__ = [
    "CancellationToken",
    "DropEntry",
    "DropItem",
    "DropPayload",
    "EntryTraverser",
    "FileAssetBuilder",
    "FileHandle",
    "IngestionBusyError",
    "IngestionComplete",
    "IngestionError",
    "IngestionEvent",
    "IngestionSession",
    "IngestionStatus",
    "LocalEntry",
    "LocalFile",
    "ProgressEvent",
    "asset_from_text",
    "new_note",
]
