"""Collect pasted text, links and dropped files into one searchable asset board."""

from importlib import metadata as _metadata

from .classification import ClassificationResult, classify
from .collection import Asset, AssetCollection, AssetType
from .ingestion import DropPayload, IngestionSession, ProgressEvent
from .search import QueryOptions, SortState, query

__all__ = [
    "Asset",
    "AssetCollection",
    "AssetType",
    "ClassificationResult",
    "DropPayload",
    "IngestionSession",
    "ProgressEvent",
    "QueryOptions",
    "SortState",
    "__version__",
    "classify",
    "query",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("mindstash")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
