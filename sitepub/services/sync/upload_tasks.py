"""
Concurrent upload task set.

Fans out single-object writes onto a thread pool and exposes one
completion point, :meth:`UploadTaskSet.join`, which waits for every
upload to reach a terminal state before reporting anything.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ...exceptions import RemoteWriteError, UploadTimeoutError
from ...utils.logger import get_logger
from ..storage.base import StorageAccessor
from .local_files import read_bytes

log = get_logger(__name__)

# Admission limit: at most this many writes are in flight at once
DEFAULT_MAX_UPLOAD_WORKERS: int = 16


def check_max_workers(max_workers: int) -> None:
    """Reject a worker count that could never run an upload.

    Raises:
        ValueError: If *max_workers* is not a positive integer
    """
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ValueError(f"max_workers must be a positive integer, got {max_workers!r}")


@dataclass(frozen=True)
class UploadTask:
    """A single pending write."""

    key: str
    """Remote key (forward slashes, no leading slash)"""

    payload: bytes
    """Bytes to store; owned by this task until handed to the accessor"""

    content_type: Optional[str] = None
    """Explicit media type, or None to leave it to the accessor"""


class UploadTaskSet:
    """Bounded set of concurrently running uploads with a join barrier.

    Local reads happen synchronously in :meth:`push`, so a read failure
    surfaces immediately to the caller. At most *max_pending* uploads are
    queued or running at a time and :meth:`push_task` blocks until a slot
    frees up, which also bounds the payloads held in memory. Remote write
    failures are collected and reported by :meth:`join` only after every
    upload has finished, as the first failure in submission order.

    The accessor is shared by all workers and must be thread-safe.

    Args:
        storage: Accessor every upload writes through
        max_workers: Maximum number of concurrent writes
        max_pending: Maximum number of uploads queued or running
            (default: twice *max_workers*)

    Example:
        >>> tasks = UploadTaskSet(storage)
        >>> tasks.push("index.html", "public/index.html")
        >>> tasks.join()
        1
    """

    def __init__(self, storage: StorageAccessor, max_workers: int = DEFAULT_MAX_UPLOAD_WORKERS,
                 max_pending: Optional[int] = None):
        check_max_workers(max_workers)
        if max_pending is None:
            max_pending = max_workers * 2
        if max_pending < max_workers:
            raise ValueError("max_pending must be at least max_workers")
        self.storage = storage
        self.max_workers = max_workers
        self.max_pending = max_pending
        self._slots = threading.BoundedSemaphore(max_pending)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="upload"
        )
        self._scheduled: List[Tuple[str, Future]] = []
        self._closed = False

    def __len__(self):
        return len(self._scheduled)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self._closed:
            self.abort()
        return False

    def _ensure_open(self):
        if self._closed:
            raise RuntimeError("UploadTaskSet has already been joined or aborted")

    # ── Submission ─────────────────────────────────────────────────────

    def push(self, key: str, source, content_type: Optional[str] = None) -> None:
        """Read *source* and schedule its upload under *key*.

        Returns as soon as the write is scheduled, which may mean waiting
        for an earlier upload to finish when *max_pending* are in flight.

        Args:
            key: Remote key
            source: Local file path
            content_type: Explicit media type (optional)

        Raises:
            LocalReadError: If *source* cannot be read (nothing is scheduled)
        """
        self._ensure_open()
        payload = read_bytes(source)
        self.push_task(UploadTask(key=key, payload=payload, content_type=content_type))

    def push_task(self, task: UploadTask) -> None:
        """Schedule an already-built task, waiting for a free slot."""
        self._ensure_open()
        self._slots.acquire()
        try:
            future = self._executor.submit(self._upload, task)
        except BaseException:
            self._slots.release()
            raise
        future.add_done_callback(self._release_slot)
        self._scheduled.append((task.key, future))

    def push_many(self, keys: Iterable[str], root=None) -> None:
        """Schedule a batch where each local path equals its remote key.

        Every file is read before anything is scheduled, so a read error
        aborts the whole batch without issuing any of its uploads. The
        whole batch is held in memory; use it for short file lists.

        Args:
            keys: Relative paths, used verbatim as remote keys
            root: Directory the paths are relative to (default: cwd)

        Raises:
            LocalReadError: On the first file that cannot be read
        """
        self._ensure_open()
        base = Path(root) if root is not None else None
        tasks = []
        for key in keys:
            source = base / key if base is not None else Path(key)
            tasks.append(UploadTask(key=key, payload=read_bytes(source)))

        for task in tasks:
            self.push_task(task)

    def _release_slot(self, _future: Future) -> None:
        self._slots.release()

    def _upload(self, task: UploadTask) -> None:
        log.info("Uploading: %s", task.key)
        try:
            self.storage.write(task.key, task.payload, task.content_type)
        except Exception as e:
            raise RemoteWriteError(task.key, e) from e

    # ── Completion ─────────────────────────────────────────────────────

    def join(self, timeout: Optional[float] = None) -> int:
        """Wait for every scheduled upload, then report the outcome.

        Consumes the set: no further pushes are accepted afterwards.

        Args:
            timeout: Overall deadline in seconds (None waits indefinitely)

        Returns:
            Number of uploads attempted

        Raises:
            RemoteWriteError: The first failed upload in submission order
            UploadTimeoutError: If the deadline expired; uploads that had
                not started are cancelled, started ones finish on their own
        """
        self._ensure_open()
        self._closed = True

        scheduled, self._scheduled = self._scheduled, []
        _, not_done = wait([future for _, future in scheduled], timeout=timeout)

        if not_done:
            self._executor.shutdown(wait=False, cancel_futures=True)
            pending = [key for key, future in scheduled if future in not_done]
            log.error("Upload deadline of %ss expired with %d pending", timeout, len(pending))
            raise UploadTimeoutError(timeout, pending)

        self._executor.shutdown(wait=True)

        errors = [future.exception() for _, future in scheduled]
        failures = [e for e in errors if e is not None]
        if failures:
            log.error("%d of %d upload(s) failed", len(failures), len(scheduled))
            raise failures[0]

        log.debug("All %d upload(s) completed", len(scheduled))
        return len(scheduled)

    def abort(self) -> None:
        """Cancel uploads that have not started and wait for the rest.

        Used when the caller gives up before :meth:`join`; the outcome of
        uploads that did run is discarded.
        """
        if self._closed:
            return
        self._closed = True
        cancelled = sum(1 for _, future in self._scheduled if future.cancel())
        self._executor.shutdown(wait=True, cancel_futures=True)
        if cancelled:
            log.warning("Cancelled %d queued upload(s)", cancelled)
        self._scheduled = []
