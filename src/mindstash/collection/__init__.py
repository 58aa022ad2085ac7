"""In-memory asset collection for mindstash."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Sequence

from pydantic import ValidationError

from .errors import (
    AssetNotFoundError,
    CollectionError,
    DuplicateAssetError,
    ImmutableFieldError,
)
from .models import Asset, AssetType, NoteStyle

LOGGER = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = frozenset({"id", "type", "added_at", "aspect_ratio", "tags"})
_UPDATABLE_FIELDS = frozenset({"content", "title", "thumbnail", "metadata"})


class AssetCollection:
    """Ordered store of assets, newest first.

    The collection is the only place assets change. Every mutation replaces the
    stored asset with an updated copy, so ``id`` and ``type`` stay fixed, tag
    order is preserved and metadata updates merge into the existing mapping.
    """

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: list[Asset] = []
        self._ids: set[str] = set()
        self.extend_front(list(assets))

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(tuple(self._assets))

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._ids

    def snapshot(self) -> tuple[Asset, ...]:
        """Return the current assets as an immutable sequence."""
        return tuple(self._assets)

    def get(self, asset_id: str) -> Asset:
        """Return the asset stored under ``asset_id``.

        Raises:
            AssetNotFoundError: If the id is unknown.
        """
        return self._assets[self._index(asset_id)]

    def add(self, asset: Asset) -> Asset:
        """Insert a single asset at the front of the collection."""
        self.extend_front([asset])
        return asset

    def extend_front(self, assets: Sequence[Asset]) -> None:
        """Prepend ``assets`` as one batch, keeping their relative order.

        The batch is validated before anything is inserted, so either every
        asset lands or none does.

        Raises:
            DuplicateAssetError: If any id is already stored or repeats in the batch.
        """
        seen: set[str] = set()
        for asset in assets:
            if asset.id in self._ids or asset.id in seen:
                raise DuplicateAssetError(f"Asset id {asset.id!r} is already in use.")
            seen.add(asset.id)
        self._assets[:0] = assets
        self._ids.update(seen)
        LOGGER.debug("Added %d asset(s); collection holds %d.", len(seen), len(self._assets))

    def update(self, asset_id: str, **changes: Any) -> Asset:
        """Apply a partial update to an asset.

        ``metadata`` is merged key by key into the existing mapping. ``content``
        may only change for notes; every other asset holds a reference there.

        Args:
            asset_id: Identifier of the asset to update.
            **changes: Field values keyed by field name.

        Returns:
            Asset: The stored, updated asset.

        Raises:
            AssetNotFoundError: If the id is unknown.
            ImmutableFieldError: If a fixed field, or note-only content, is targeted.
            CollectionError: If an unknown field is supplied.
        """
        index = self._index(asset_id)
        current = self._assets[index]

        fixed = sorted(set(changes) & _IMMUTABLE_FIELDS)
        if fixed:
            raise ImmutableFieldError(f"Cannot change {', '.join(fixed)} on asset {asset_id!r}.")
        unknown = sorted(set(changes) - _UPDATABLE_FIELDS)
        if unknown:
            raise CollectionError(f"Unknown asset field(s): {', '.join(unknown)}.")
        if "content" in changes and current.type is not AssetType.NOTE:
            raise ImmutableFieldError(
                f"Content of {current.type.value} asset {asset_id!r} is fixed at creation."
            )

        if "metadata" in changes:
            changes["metadata"] = {**current.metadata, **(changes["metadata"] or {})}

        updated = current.model_copy(update=changes)
        self._assets[index] = updated
        return updated

    def restyle_note(self, asset_id: str, **style: str) -> Asset:
        """Merge validated note styling (font family, size, alignment) into metadata.

        Raises:
            CollectionError: If the asset is not a note or a style value is invalid.
        """
        current = self.get(asset_id)
        if current.type is not AssetType.NOTE:
            raise CollectionError(f"Asset {asset_id!r} is not a note.")
        try:
            validated = NoteStyle.model_validate(style).model_dump(include=set(style))
        except ValidationError as exc:
            raise CollectionError(f"Invalid note style: {exc}") from exc
        return self.update(asset_id, metadata=validated)

    def remove(self, asset_id: str) -> Asset:
        """Delete an asset and return it.

        Raises:
            AssetNotFoundError: If the id is unknown.
        """
        removed = self._assets.pop(self._index(asset_id))
        self._ids.discard(asset_id)
        return removed

    def add_tag(self, asset_id: str, tag: str) -> Asset:
        """Append ``tag`` (trimmed) to the asset; blank tags are ignored."""
        current = self.get(asset_id)
        cleaned = tag.strip()
        if not cleaned:
            return current
        return self._replace(current, tags=[*current.tags, cleaned])

    def remove_tag(self, asset_id: str, tag: str) -> Asset:
        """Remove every occurrence of ``tag`` from the asset, keeping the rest in order."""
        current = self.get(asset_id)
        kept = [existing for existing in current.tags if existing != tag]
        return self._replace(current, tags=kept)

    def _replace(self, current: Asset, **fields: Any) -> Asset:
        updated = current.model_copy(update=fields)
        self._assets[self._index(current.id)] = updated
        return updated

    def _index(self, asset_id: str) -> int:
        if asset_id in self._ids:
            for position, asset in enumerate(self._assets):
                if asset.id == asset_id:
                    return position
        raise AssetNotFoundError(f"No asset with id {asset_id!r}.")


__all__ = [
    "Asset",
    "AssetCollection",
    "AssetNotFoundError",
    "AssetType",
    "CollectionError",
    "DuplicateAssetError",
    "ImmutableFieldError",
    "NoteStyle",
]
