"""
Local-directory storage backend.

Treats a directory as the object namespace: each key is a file path
relative to the root. The filesystem keeps no content-type metadata, so
:meth:`LocalStorage.stat` reports none.
"""
import os
from pathlib import Path
from typing import List, Optional

from ...exceptions import StorageError
from .base import ObjectMetadata, StorageAccessor


class LocalStorage(StorageAccessor):
    """Storage accessor rooted at a local directory.

    Distinct keys map to distinct files, and parent directories are
    created with ``exist_ok``, so concurrent writers do not interfere.

    Args:
        root: Directory that holds the namespace (created if missing)
    """

    def __init__(self, root):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        key = key.strip("/")
        if not key or any(part in ("", ".", "..") for part in key.split("/")):
            raise StorageError(f"Invalid key: '{key}'")
        return self.root.joinpath(*key.split("/"))

    def _all_keys(self):
        for dirpath, _, filenames in os.walk(self.root):
            for filename in filenames:
                full = Path(dirpath) / filename
                yield full.relative_to(self.root).as_posix()

    def write(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        target = self._path(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Writing {target} failed: {e}") from e

    def remove_all(self, prefix: str) -> None:
        try:
            doomed = [k for k in self._all_keys() if k.startswith(prefix)]
            for key in doomed:
                (self.root / key).unlink()
            self._prune_empty_dirs()
        except OSError as e:
            raise StorageError(f"Removing '{prefix}' failed: {e}") from e

    def _prune_empty_dirs(self):
        for dirpath, _, _ in os.walk(self.root, topdown=False):
            path = Path(dirpath)
            if path != self.root and not any(path.iterdir()):
                path.rmdir()

    def list(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._all_keys() if k.startswith(prefix))

    def stat(self, key: str) -> ObjectMetadata:
        path = self._path(key)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise StorageError(f"stat {key} failed: {e}") from e
        return ObjectMetadata(key=key, size=size)

