"""Tests for rule-based text classification."""

import pytest

from mindstash.classification import classify, extract_video_id, video_thumbnail_url
from mindstash.collection import AssetType


@pytest.mark.parametrize(
    "text",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://www.youtube.com/embed/dQw4w9WgXcQ?start=10",
        "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
    ],
)
def test_video_links_extract_id_and_thumbnail(text: str) -> None:
    result = classify(text)

    assert result.type is AssetType.VIDEO
    assert result.content == text
    assert result.metadata["video_id"] == "dQw4w9WgXcQ"
    assert result.metadata["thumbnail"] == video_thumbnail_url("dQw4w9WgXcQ")
    assert result.metadata["thumbnail"].endswith("/dQw4w9WgXcQ/maxresdefault.jpg")


def test_video_id_must_be_eleven_characters() -> None:
    assert extract_video_id("https://www.youtube.com/watch?v=short") is None

    result = classify("https://www.youtube.com/watch?v=short")

    assert result.type is AssetType.LINK
    assert result.metadata == {"domain": "www.youtube.com"}


@pytest.mark.parametrize(
    ("text", "author"),
    [
        ("https://twitter.com/jack/status/20", "@jack"),
        ("https://x.com/some_user/status/1234567890?s=20", "@some_user"),
    ],
)
def test_social_posts_capture_author(text: str, author: str) -> None:
    result = classify(text)

    assert result.type is AssetType.TWEET
    assert result.metadata == {"author": author}


def test_image_urls_match_extension_case_insensitively() -> None:
    result = classify("https://cdn.example.com/photos/cat.PNG")

    assert result.type is AssetType.IMAGE
    assert result.metadata == {}


def test_image_extension_must_end_the_string() -> None:
    result = classify("https://cdn.example.com/cat.png?size=large")

    assert result.type is AssetType.LINK


def test_generic_links_record_domain() -> None:
    result = classify("  https://docs.example.org/guide?page=2  ")

    assert result.type is AssetType.LINK
    assert result.content == "https://docs.example.org/guide?page=2"
    assert result.metadata == {"domain": "docs.example.org"}


@pytest.mark.parametrize(
    "text",
    [
        "remember to buy milk",
        "ftp://files.example.com/archive",
        "http://",
        "http://[::1",
        "https://example.com has spaces",
    ],
)
def test_everything_else_is_a_note(text: str) -> None:
    result = classify(text)

    assert result.type is AssetType.NOTE
    assert result.content == text.strip()
    assert result.metadata == {}


def test_video_rule_wins_over_link_rule() -> None:
    """Rules are ordered; the first match decides the type."""
    result = classify("https://youtu.be/dQw4w9WgXcQ")

    assert result.type is AssetType.VIDEO
    assert "domain" not in result.metadata
