"""
Directory mirroring.

Makes the remote namespace under a prefix an exact copy of a local
directory tree by wiping the prefix and re-uploading every file. There
is no diffing and no atomic swap: if an upload fails, the objects that
did upload stay in place and the prefix is left partially populated.
Writers outside this process touching the same prefix during a mirror
are not coordinated with.
"""
from typing import Optional

from ...exceptions import RemoteDeleteError, StorageError
from ...utils.logger import get_logger
from ..storage.base import StorageAccessor
from .local_files import join_key, list_regular_files, relative_key
from .upload_tasks import DEFAULT_MAX_UPLOAD_WORKERS, UploadTaskSet, check_max_workers

log = get_logger(__name__)


class MirrorResult:
    """Outcome of a successful mirror.

    Attributes:
        tasks_attempted: Number of files uploaded
    """

    def __init__(self, tasks_attempted: int):
        self.tasks_attempted = tasks_attempted

    def __eq__(self, other):
        if not isinstance(other, MirrorResult):
            return NotImplemented
        return self.tasks_attempted == other.tasks_attempted

    def __repr__(self):
        return f"MirrorResult(tasks_attempted={self.tasks_attempted})"


class DirectoryMirror:
    """Mirrors local directory trees into a storage accessor.

    Args:
        storage: Shared accessor (must be thread-safe)
        max_workers: Upload concurrency limit
        timeout: Overall upload deadline per mirror, in seconds

    Raises:
        ValueError: If *max_workers* is not a positive integer
    """

    def __init__(
        self,
        storage: StorageAccessor,
        max_workers: int = DEFAULT_MAX_UPLOAD_WORKERS,
        timeout: Optional[float] = None,
    ):
        check_max_workers(max_workers)
        self.storage = storage
        self.max_workers = max_workers
        self.timeout = timeout

    def mirror(self, local_root, remote_prefix: str) -> MirrorResult:
        """Replace everything under *remote_prefix* with the files of *local_root*.

        Steps: enumerate local files, delete the remote prefix, upload one
        task per file in path order, wait for all of them. If a file turns
        out to be unreadable after the delete, uploads not yet started are
        cancelled and the prefix is left partially populated.

        Args:
            local_root: Local directory to publish
            remote_prefix: Key prefix to replace ("" for the whole namespace)

        Returns:
            MirrorResult with the number of uploads attempted

        Raises:
            LocalReadError: Enumeration or a file read failed
            RemoteDeleteError: The prefix could not be cleared (nothing uploaded)
            RemoteWriteError: First failed upload, after all uploads finished
            UploadTimeoutError: The upload deadline expired
        """
        prefix = remote_prefix.strip("/")

        files = sorted(list_regular_files(local_root))
        planned = [(path, join_key(prefix, relative_key(path, local_root))) for path in files]
        log.debug("Found %d file(s) under %s", len(planned), local_root)

        delete_prefix = f"{prefix}/" if prefix else ""
        try:
            self.storage.remove_all(delete_prefix)
        except StorageError as e:
            raise RemoteDeleteError(delete_prefix, e) from e

        with UploadTaskSet(self.storage, max_workers=self.max_workers) as tasks:
            for path, key in planned:
                tasks.push(key, path)
            attempted = tasks.join(timeout=self.timeout)

        log.info("Mirrored %d file(s) from %s to '%s'", attempted, local_root, prefix or "/")
        return MirrorResult(tasks_attempted=attempted)


def mirror_directory(
    storage: StorageAccessor,
    local_root,
    remote_prefix: str,
    max_workers: int = DEFAULT_MAX_UPLOAD_WORKERS,
    timeout: Optional[float] = None,
) -> MirrorResult:
    """Mirror *local_root* into *storage* under *remote_prefix*.

    Convenience wrapper around :class:`DirectoryMirror`.
    """
    return DirectoryMirror(storage, max_workers=max_workers, timeout=timeout).mirror(
        local_root, remote_prefix
    )


__all__ = ["DirectoryMirror", "MirrorResult", "mirror_directory"]
