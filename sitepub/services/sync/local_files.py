"""
Local filesystem access for the sync engine.

Enumeration follows ``os.walk`` defaults: directory symlinks are not
descended into, and symlinks to files are listed like regular files.
Sockets, FIFOs and device nodes are not filtered out.
"""
import os
from pathlib import Path, PurePath
from typing import List

from ...exceptions import LocalReadError


def _raise_walk_error(error: OSError):
    raise LocalReadError(error.filename or "<unknown>", error) from error


def list_regular_files(root) -> List[Path]:
    """Recursively list every file under *root*.

    Args:
        root: Directory to enumerate

    Returns:
        Absolute-or-root-joined file paths, in no particular order

    Raises:
        LocalReadError: If *root* is not a directory or a subdirectory
            cannot be read
    """
    root = Path(root)
    if not root.is_dir():
        raise LocalReadError(root, NotADirectoryError("not a directory"))

    files = []
    for dirpath, _, filenames in os.walk(root, onerror=_raise_walk_error):
        for filename in filenames:
            files.append(Path(dirpath) / filename)
    return files


def read_bytes(path) -> bytes:
    """Read the full contents of *path*.

    Raises:
        LocalReadError: If the file cannot be opened or read
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise LocalReadError(path, e) from e


def relative_key(path, root) -> str:
    """Derive a forward-slash key from *path* relative to *root*.

    Example:
        >>> relative_key("public/img/logo.png", "public")
        'img/logo.png'
    """
    return PurePath(path).relative_to(PurePath(root)).as_posix()


def join_key(prefix: str, relative: str) -> str:
    """Join a remote prefix and a relative key with exactly one slash.

    Example:
        >>> join_key("/site/", "index.html")
        'site/index.html'
        >>> join_key("", "index.html")
        'index.html'
    """
    prefix = prefix.strip("/")
    relative = relative.lstrip("/")
    return f"{prefix}/{relative}" if prefix else relative
