"""Text classification for pasted and dropped input."""

from .engine import classify, extract_video_id, video_thumbnail_url
from .models import ClassificationResult

__all__ = ["ClassificationResult", "classify", "extract_video_id", "video_thumbnail_url"]
