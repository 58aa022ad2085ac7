"""Filter, search and sort over an asset collection."""

from __future__ import annotations

import locale
from collections import Counter
from enum import Enum
from typing import Any, Callable, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict

from mindstash.collection.models import Asset, AssetType

FILTER_ALL = "ALL"


class SortKey(str, Enum):
    """Fields the query engine can order by."""

    DATE = "date"
    NAME = "name"
    SIZE = "size"


class SortDirection(str, Enum):
    """Ordering direction."""

    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


class QueryOptions(BaseModel):
    """Parameters of a collection query.

    Attributes:
        filter_type: Asset type to keep, or ``"ALL"``.
        search_text: Case-insensitive substring matched against content, title and tags.
        sort_key: Field used for ordering.
        sort_direction: Ascending or descending order.
    """

    model_config = ConfigDict(frozen=True)

    filter_type: Union[AssetType, Literal["ALL"]] = FILTER_ALL
    search_text: str = ""
    sort_key: SortKey = SortKey.DATE
    sort_direction: SortDirection = SortDirection.DESC


class SortState(BaseModel):
    """Sort selection that toggles direction when the same key is chosen again."""

    model_config = ConfigDict(frozen=True)

    key: SortKey = SortKey.DATE
    direction: SortDirection = SortDirection.DESC

    def select(self, key: SortKey | str) -> "SortState":
        """Return the state after the user picks ``key``.

        A newly selected key starts descending; re-selecting the current key
        flips the direction.
        """
        chosen = SortKey(key)
        if chosen is self.key:
            return SortState(key=chosen, direction=self.direction.flipped())
        return SortState(key=chosen, direction=SortDirection.DESC)


def _file_size(asset: Asset) -> float:
    value = asset.metadata.get("file_size")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return 0


def _name_key(asset: Asset) -> tuple[str, str]:
    # Case-insensitive first so the C locale does not put every capital first.
    title = asset.title or ""
    return locale.strxfrm(title.casefold()), locale.strxfrm(title)


_SORT_KEYS: dict[SortKey, Callable[[Asset], Any]] = {
    SortKey.DATE: lambda asset: asset.added_at,
    SortKey.NAME: _name_key,
    SortKey.SIZE: _file_size,
}


def matches_search(asset: Asset, needle: str) -> bool:
    """Return whether ``needle`` (already case-folded) occurs in the asset's text fields."""
    if needle in asset.content.casefold():
        return True
    if asset.title and needle in asset.title.casefold():
        return True
    return any(needle in tag.casefold() for tag in asset.tags)


def query(
    collection: Iterable[Asset],
    options: QueryOptions | None = None,
    **overrides: Any,
) -> list[Asset]:
    """Return the filtered, searched and sorted view of ``collection``.

    The collection is never modified; each call recomputes the view.

    Args:
        collection: Assets to query (an ``AssetCollection`` or any iterable).
        options: Query parameters; defaults to all assets, newest first.
        **overrides: Individual ``QueryOptions`` fields replacing those in ``options``.

    Returns:
        list[Asset]: Matching assets in the requested order.
    """
    if overrides:
        base = (options or QueryOptions()).model_dump()
        options = QueryOptions.model_validate({**base, **overrides})
    elif options is None:
        options = QueryOptions()

    selected: Iterable[Asset] = collection
    if options.filter_type != FILTER_ALL:
        selected = (asset for asset in selected if asset.type == options.filter_type)

    needle = options.search_text.strip().casefold()
    if needle:
        selected = (asset for asset in selected if matches_search(asset, needle))

    return sorted(
        selected,
        key=_SORT_KEYS[options.sort_key],
        reverse=options.sort_direction is SortDirection.DESC,
    )


def type_counts(collection: Iterable[Asset]) -> dict[str, int]:
    """Count assets per type, plus an ``ALL`` total."""
    counts = Counter(asset.type.value for asset in collection)
    result = {asset_type.value: counts.get(asset_type.value, 0) for asset_type in AssetType}
    result[FILTER_ALL] = sum(counts.values())
    return result


__all__ = [
    "FILTER_ALL",
    "QueryOptions",
    "SortDirection",
    "SortKey",
    "SortState",
    "matches_search",
    "query",
    "type_counts",
]
