"""Assets created from pasted text, dropped strings and new notes."""

from __future__ import annotations

import random
import uuid
from typing import Callable, Literal, Optional

from mindstash.classification import classify
from mindstash.collection.models import Asset, AssetType, NoteStyle

from .models import now_ms

TextSource = Literal["paste", "drop"]

NOTE_TITLES = {"paste": "Quick Note", "drop": "Dropped Text"}
PASTE_ASPECT_RATIOS = (300, 400)
DROP_ASPECT_RATIO = 350
NOTE_ASPECT_RATIO = 250


def _text_asset_id(prefix: str, timestamp: int) -> str:
    return f"{prefix}-{timestamp}-{uuid.uuid4().hex[:8]}"


def asset_from_text(
    text: str,
    source: TextSource = "paste",
    *,
    clock: Callable[[], int] = now_ms,
    rng: random.Random | None = None,
) -> Optional[Asset]:
    """Classify ``text`` and build the asset a paste or drop would create.

    Args:
        text: Raw pasted or dropped string.
        source: Gesture that produced the text; drives title and layout hint.
        clock: Millisecond clock used for ``added_at`` and the id.
        rng: Random source for the paste layout hint.

    Returns:
        Optional[Asset]: The new asset, or None when the text is blank.
    """
    if not text.strip():
        return None

    result = classify(text)
    timestamp = clock()
    if source == "paste":
        aspect_ratio = (rng or random).choice(PASTE_ASPECT_RATIOS)
    else:
        aspect_ratio = DROP_ASPECT_RATIO
    title = NOTE_TITLES[source] if result.type is AssetType.NOTE else result.content

    return Asset(
        id=_text_asset_id(source, timestamp),
        type=result.type,
        content=result.content,
        title=title,
        thumbnail=result.metadata.get("thumbnail"),
        metadata=dict(result.metadata),
        tags=[],
        added_at=timestamp,
        aspect_ratio=aspect_ratio,
    )


def new_note(content: str, *, clock: Callable[[], int] = now_ms) -> Optional[Asset]:
    """Build a styled note from editor content; blank content creates nothing."""
    if not content.strip():
        return None
    timestamp = clock()
    return Asset(
        id=_text_asset_id("note", timestamp),
        type=AssetType.NOTE,
        content=content,
        metadata=NoteStyle().model_dump(),
        tags=[],
        added_at=timestamp,
        aspect_ratio=NOTE_ASPECT_RATIO,
    )


__all__ = ["TextSource", "asset_from_text", "new_note"]
