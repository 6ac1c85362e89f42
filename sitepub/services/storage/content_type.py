"""
Content-type inference from file extensions.

Only the interpreter's built-in extension table is consulted (never the
host's ``/etc/mime.types``), so the same path maps to the same type on
every machine.
"""
import mimetypes
import posixpath
from typing import Optional

# Built-in defaults only; MimeTypes() without filenames skips system files.
_TABLE = mimetypes.MimeTypes()

# Web formats the built-in table lacks or maps differently across versions.
_EXTRA_TYPES = {
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".webmanifest": "application/manifest+json",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".md": "text/markdown",
    ".map": "application/json",
}

# A compressed file is stored as-is, so it is typed by its encoding.
_ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "br": "application/x-brotli",
    "compress": "application/x-compress",
}


def resolve_content_type(path: str) -> Optional[str]:
    """Guess the media type of *path* from its final segment's extension.

    Args:
        path: Local path or remote key; either separator style is accepted

    Returns:
        Media type string, or None when the extension is absent or unknown

    Example:
        >>> resolve_content_type("site/index.html")
        'text/html'
        >>> resolve_content_type("data.unknownext") is None
        True
    """
    name = posixpath.basename(path.replace("\\", "/"))
    if not name:
        return None

    ext = posixpath.splitext(name)[1].lower()
    if not ext:
        return None

    if ext in _EXTRA_TYPES:
        return _EXTRA_TYPES[ext]

    guessed, encoding = _TABLE.guess_type(name, strict=False)
    if encoding is not None:
        return _ENCODING_TYPES.get(encoding)
    return guessed
