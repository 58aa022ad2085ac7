"""Unit tests for the in-memory asset collection."""

import pytest

from mindstash.collection import (
    Asset,
    AssetCollection,
    AssetNotFoundError,
    AssetType,
    CollectionError,
    DuplicateAssetError,
    ImmutableFieldError,
)
from mindstash.ingestion import new_note


def _asset(asset_id: str, asset_type: AssetType = AssetType.LINK, **fields) -> Asset:
    defaults = {
        "content": f"https://example.com/{asset_id}",
        "title": asset_id,
        "added_at": 1_000,
        "aspect_ratio": 300,
    }
    defaults.update(fields)
    return Asset(id=asset_id, type=asset_type, **defaults)


def test_new_assets_are_prepended_as_a_batch() -> None:
    collection = AssetCollection([_asset("old")])

    collection.extend_front([_asset("a"), _asset("b")])

    assert [asset.id for asset in collection] == ["a", "b", "old"]
    assert len(collection) == 3
    assert "a" in collection


def test_duplicate_ids_reject_the_whole_batch() -> None:
    collection = AssetCollection([_asset("a")])

    with pytest.raises(DuplicateAssetError):
        collection.extend_front([_asset("b"), _asset("a")])

    assert [asset.id for asset in collection] == ["a"]


def test_update_merges_metadata_shallowly() -> None:
    collection = AssetCollection()
    note = collection.add(new_note("draft", clock=lambda: 5))
    assert note is not None

    collection.update(note.id, metadata={"font_family": "serif"})
    updated = collection.update(note.id, metadata={"font_size": "lg"})

    assert updated.metadata["font_family"] == "serif"
    assert updated.metadata["font_size"] == "lg"
    assert updated.metadata["text_align"] == "left"
    assert collection.get(note.id) == updated


def test_update_preserves_unknown_metadata_keys() -> None:
    collection = AssetCollection([_asset("a", metadata={"custom": 1})])

    updated = collection.update("a", title="Renamed", metadata={"domain": "example.com"})

    assert updated.title == "Renamed"
    assert updated.metadata == {"custom": 1, "domain": "example.com"}


@pytest.mark.parametrize("field", ["id", "type", "added_at", "aspect_ratio", "tags"])
def test_update_rejects_fixed_fields(field: str) -> None:
    collection = AssetCollection([_asset("a")])

    with pytest.raises(ImmutableFieldError):
        collection.update("a", **{field: "x"})


def test_content_is_editable_only_for_notes() -> None:
    collection = AssetCollection([_asset("link"), _asset("note", AssetType.NOTE, content="hi")])

    with pytest.raises(ImmutableFieldError):
        collection.update("link", content="https://other.example.com")

    assert collection.update("note", content="hello").content == "hello"


def test_update_rejects_unknown_fields() -> None:
    collection = AssetCollection([_asset("a")])

    with pytest.raises(CollectionError):
        collection.update("a", colour="red")


def test_unknown_ids_raise_not_found() -> None:
    collection = AssetCollection()

    with pytest.raises(AssetNotFoundError):
        collection.get("missing")
    with pytest.raises(AssetNotFoundError):
        collection.update("missing", title="x")
    with pytest.raises(AssetNotFoundError):
        collection.remove("missing")
    with pytest.raises(AssetNotFoundError):
        collection.add_tag("missing", "tag")


def test_remove_returns_asset_and_frees_id() -> None:
    collection = AssetCollection([_asset("a"), _asset("b")])

    removed = collection.remove("a")

    assert removed.id == "a"
    assert [asset.id for asset in collection] == ["b"]
    collection.add(_asset("a"))
    assert [asset.id for asset in collection] == ["a", "b"]


def test_tags_keep_insertion_order_and_ignore_blanks() -> None:
    collection = AssetCollection([_asset("a")])

    collection.add_tag("a", " research ")
    collection.add_tag("a", "   ")
    collection.add_tag("a", "todo")
    collection.add_tag("a", "research")

    assert collection.get("a").tags == ["research", "todo", "research"]

    remaining = collection.remove_tag("a", "research")

    assert remaining.tags == ["todo"]


def test_restyle_note_validates_values() -> None:
    collection = AssetCollection([_asset("n", AssetType.NOTE, content="text")])

    styled = collection.restyle_note("n", text_align="center")
    assert styled.metadata == {"text_align": "center"}

    with pytest.raises(CollectionError):
        collection.restyle_note("n", font_size="huge")
    with pytest.raises(CollectionError):
        collection.restyle_note("n", colour="red")


def test_restyle_rejects_non_notes() -> None:
    collection = AssetCollection([_asset("a")])

    with pytest.raises(CollectionError):
        collection.restyle_note("a", font_family="sans")


def test_snapshot_is_isolated_from_later_mutations() -> None:
    collection = AssetCollection([_asset("a")])
    before = collection.snapshot()

    collection.update("a", title="changed")

    assert before[0].title == "a"
    assert collection.get("a").title == "changed"
