"""Rule-based classification of pasted and dropped text.

Rules are evaluated in order and the first match wins: video links, social
posts, image URLs, generic web links, and finally plain notes. Classification
never performs I/O and never raises; anything unrecognized becomes a note.
"""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlsplit

from mindstash.collection.models import AssetType

from .models import ClassificationResult

LOGGER = logging.getLogger(__name__)

VIDEO_ID_LENGTH = 11
_VIDEO_PATTERN = re.compile(r"^.*(?:youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")
_POST_PATTERN = re.compile(r"(?:twitter\.com|x\.com)/(\w+)/status/\d+")
_IMAGE_PATTERN = re.compile(r"\.(?:jpeg|jpg|gif|png|webp|avif)$", re.IGNORECASE)
_URL_PATTERN = re.compile(r"^(?:http|https)://[^\s\"']+$")


def video_thumbnail_url(video_id: str) -> str:
    """Return the preview image URL for a video identifier."""
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def extract_video_id(text: str) -> Optional[str]:
    """Return the 11-character video id embedded in ``text``, if any."""
    match = _VIDEO_PATTERN.match(text)
    if match and len(match.group(1)) == VIDEO_ID_LENGTH:
        return match.group(1)
    return None


def classify(text: str) -> ClassificationResult:
    """Classify raw input into an asset type, normalized content and metadata.

    Args:
        text: Pasted or dropped string.

    Returns:
        ClassificationResult: Type, trimmed content, and type-specific metadata.
    """
    trimmed = text.strip()

    video_id = extract_video_id(trimmed)
    if video_id:
        return ClassificationResult(
            type=AssetType.VIDEO,
            content=trimmed,
            metadata={"thumbnail": video_thumbnail_url(video_id), "video_id": video_id},
        )

    post = _POST_PATTERN.search(trimmed)
    if post:
        return ClassificationResult(
            type=AssetType.TWEET,
            content=trimmed,
            metadata={"author": f"@{post.group(1)}"},
        )

    if _IMAGE_PATTERN.search(trimmed):
        return ClassificationResult(type=AssetType.IMAGE, content=trimmed)

    if _URL_PATTERN.match(trimmed):
        host = _parse_host(trimmed)
        if host:
            return ClassificationResult(
                type=AssetType.LINK, content=trimmed, metadata={"domain": host}
            )
        LOGGER.debug("Treating unparseable URL as a note: %r", trimmed)

    return ClassificationResult(type=AssetType.NOTE, content=trimmed)


def _parse_host(candidate: str) -> Optional[str]:
    try:
        parts = urlsplit(candidate)
        # Accessing the port validates it (numeric, within range).
        parts.port
    except ValueError:
        return None
    return parts.hostname or None


__all__ = ["VIDEO_ID_LENGTH", "classify", "extract_video_id", "video_thumbnail_url"]
