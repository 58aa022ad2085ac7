"""Text helpers for rendering query results."""

from __future__ import annotations

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
_WHITESPACE = re.compile(r"\s+")


def preview_text(text: str, *, limit: int = 80) -> str:
    """Collapse ``text`` onto one line and cap it at ``limit`` characters.

    Control characters are dropped and whitespace runs become single spaces.
    Truncated output ends with an ellipsis so the result never exceeds ``limit``.
    """
    flattened = _WHITESPACE.sub(" ", _CONTROL_CHARS.sub(" ", text)).strip()
    if limit <= 0 or len(flattened) <= limit:
        return flattened
    return flattened[: max(limit - 1, 0)].rstrip() + "…"


__all__ = ["preview_text"]
