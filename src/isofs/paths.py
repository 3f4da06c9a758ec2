"""Path helpers for the isolated store.

Paths handed to the filesystem are virtual POSIX-like strings rooted at '/'.
Both '/' and '\\' are accepted as separators on the way in; canonical paths
only ever use '/'.
"""

from __future__ import annotations

from typing import List, Optional

from .exceptions import EncodingError, SandboxEscapeError

SEPARATORS = ("/", "\\")

# Characters the store never accepts inside a path
INVALID_PATH_CHARS = frozenset('"<>|') | frozenset(chr(c) for c in range(32))


def strip_query_or_fragment(value: Optional[str]) -> Optional[str]:
    """Drop everything from the first '#' or '?' onwards."""
    if value is None:
        return None
    cut = len(value)
    for marker in ("#", "?"):
        index = value.find(marker)
        if index != -1 and index < cut:
            cut = index
    return value[:cut]


def ensure_trailing_separator(path: str) -> str:
    return path if path.endswith("/") else path + "/"


def has_trailing_separator(path: str) -> bool:
    return bool(path) and path[-1] in SEPARATORS


def parent_of(path: str) -> str:
    """
    Return the parent directory of ``path``.

    The parent of the root (or of an empty path) is the root. Trailing
    separators are stripped first, so '/a/b/' and '/a/b' share the parent
    '/a'.
    """
    if not path or path == "/":
        return "/"

    if has_trailing_separator(path):
        return parent_of(path[:-1])

    index = max(path.rfind("/"), path.rfind("\\"))
    if index <= 0:
        return "/"
    return path[:index]


def split_parts(path: str) -> List[str]:
    """Split on both separators, dropping empty segments."""
    return [part for part in path.replace("\\", "/").split("/") if part]


def last_segment(path: str) -> str:
    """Return the final non-empty segment, or '' when there is none."""
    parts = split_parts(path or "")
    return parts[-1] if parts else ""


def validate_characters(path: str) -> None:
    bad = sorted({ch for ch in path if ch in INVALID_PATH_CHARS})
    if bad:
        raise EncodingError(f"Illegal characters in path: {bad!r}", path=path)


def join_path(parent: str, name: str) -> str:
    """
    Join a directory and a child name.

    A rooted ``name`` replaces ``parent`` entirely, so joining '/dst/' with
    '/src/dir' yields '/src/dir'.

    Raises:
        EncodingError: If either part contains characters the store rejects
    """
    parent = parent or ""
    name = name or ""
    validate_characters(parent)
    validate_characters(name)

    if not name:
        return parent
    if name[0] in SEPARATORS or not parent:
        return name
    if has_trailing_separator(parent):
        return parent + name
    return parent + "/" + name


def canonicalize(path: str) -> str:
    """
    Normalize a path to its canonical absolute form.

    Separators become '/', '.' segments vanish and '..' pops a segment.
    A trailing separator on the input is kept so directory paths such as
    '/tmp/' round-trip unchanged.

    Raises:
        SandboxEscapeError: If '..' climbs above the root
    """
    normalized: List[str] = []
    for part in split_parts(path or ""):
        if part == ".":
            continue
        if part == "..":
            if not normalized:
                raise SandboxEscapeError(f"Path escapes the store root: {path}", path=path)
            normalized.pop()
            continue
        normalized.append(part)

    if not normalized:
        return "/"

    result = "/" + "/".join(normalized)
    if has_trailing_separator(path):
        result += "/"
    return result


def is_root(path: str) -> bool:
    return not split_parts(path or "")


def is_within(path: str, ancestor: str) -> bool:
    """True when ``path`` lies strictly below ``ancestor``."""
    child_parts = split_parts(canonicalize(path))
    ancestor_parts = split_parts(canonicalize(ancestor))
    return (
        len(child_parts) > len(ancestor_parts)
        and child_parts[: len(ancestor_parts)] == ancestor_parts
    )


def same_path(first: str, second: str) -> bool:
    """True when both paths name the same location, ignoring trailing separators."""
    return split_parts(canonicalize(first)) == split_parts(canonicalize(second))
