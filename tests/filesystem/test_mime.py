"""
Tests for the isofs.mime module.
"""

import pytest

from isofs.mime import DEFAULT_MIME_TYPE, get_mime_type


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/a/page.html", "text/html"),
        ("/a/notes.txt", "text/plain"),
        ("/a/data.JSON", "application/json"),
        ("\\a\\song.mp3", "audio/mpeg"),
        ("/a/pic.webp", "image/webp"),
    ],
)
def test_known_extensions(path, expected):
    assert get_mime_type(path) == expected


@pytest.mark.parametrize("path", ["/a/noext", "/a/.hidden", "/a/file.unknownext", "", None])
def test_fallback(path):
    assert get_mime_type(path) == DEFAULT_MIME_TYPE
