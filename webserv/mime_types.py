"""Mapping from file extensions to MIME types."""

from __future__ import annotations

DEFAULT_MIME_TYPE = "application/octet-stream"

_MIME_TYPES = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "txt": "text/plain",
}


def mime_type_for(extension: str) -> str:
    """Return the MIME type for an extension given without its dot."""
    return _MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)