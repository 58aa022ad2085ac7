"""File type detection utilities."""

from __future__ import annotations

import mimetypes
from pathlib import Path

DEFAULT_MIME_TYPE = "application/octet-stream"

# Extensions some platform MIME tables omit.
_EXTRA_TYPES = {
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".webp": "image/webp",
    ".avif": "image/avif",
}


class TypeDetector:
    """Guess MIME types from file names."""

    def detect(self, path: Path) -> str:
        """Return the MIME type for ``path``, falling back to a generic binary type."""
        extra = _EXTRA_TYPES.get(path.suffix.lower())
        if extra:
            return extra
        guessed, _ = mimetypes.guess_type(path.name)
        return guessed or DEFAULT_MIME_TYPE


__all__ = ["DEFAULT_MIME_TYPE", "TypeDetector"]
