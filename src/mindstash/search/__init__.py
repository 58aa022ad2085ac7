"""Query engine over asset collections."""

from .query import (
    FILTER_ALL,
    QueryOptions,
    SortDirection,
    SortKey,
    SortState,
    matches_search,
    query,
    type_counts,
)
from .text import preview_text

__all__ = [
    "FILTER_ALL",
    "QueryOptions",
    "SortDirection",
    "SortKey",
    "SortState",
    "matches_search",
    "preview_text",
    "query",
    "type_counts",
]
