"""MIME type lookup by file extension."""

import mimetypes

DEFAULT_MIME_TYPE = "application/octet-stream"

# Extensions some platforms' tables lack or get wrong
_OVERRIDES = {
    ".json": "application/json",
    ".md": "text/markdown",
    ".webp": "image/webp",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".3gp": "video/3gpp",
}


def get_mime_type(path: str) -> str:
    """Return the MIME type for ``path`` based on its extension."""
    path = (path or "").replace("\\", "/")
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot > 0:
        override = _OVERRIDES.get(name[dot:].lower())
        if override:
            return override
    return mimetypes.guess_type(name)[0] or DEFAULT_MIME_TYPE
