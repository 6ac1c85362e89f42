"""Exception hierarchy for sitepub."""
from typing import Iterable, Optional


class SitepubError(Exception):
    """Base class for every error raised by sitepub."""


class ConfigError(SitepubError):
    """workflow.toml or a required environment variable is missing or invalid."""


class CommandError(SitepubError):
    """An external command exited unsuccessfully.

    Attributes:
        hint: Short name of the command (e.g. ``git``)
        returncode: Exit status, or None when the process was killed by a signal
    """

    def __init__(self, hint: str, returncode: Optional[int]):
        self.hint = hint
        self.returncode = returncode
        code = "None" if returncode is None else str(returncode)
        super().__init__(f"{hint} command failed! exit code: {code}")


class HugoFetchError(SitepubError):
    """The hugo binary could not be verified, downloaded or extracted."""


class NotificationError(SitepubError):
    """The push-notification service rejected or failed a message."""


class PublishError(SitepubError):
    """A publish step cannot proceed."""


class StorageError(SitepubError):
    """A storage backend operation failed."""


class LocalReadError(StorageError):
    """A local file or directory could not be enumerated or read."""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = str(path)
        message = f"Cannot read {self.path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class RemoteDeleteError(StorageError):
    """Removing the objects under a prefix failed."""

    def __init__(self, prefix: str, cause: Optional[BaseException] = None):
        self.prefix = prefix
        message = f"Failed to remove remote prefix '{prefix}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class RemoteWriteError(StorageError):
    """A scheduled upload failed.

    Attributes:
        key: Remote key of the failed upload
    """

    def __init__(self, key: str, cause: Optional[BaseException] = None):
        self.key = key
        message = f"Failed to upload '{key}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class UploadTimeoutError(StorageError):
    """The upload barrier deadline expired before every upload finished.

    Attributes:
        pending: Keys whose uploads had not completed at the deadline
    """

    def __init__(self, timeout: float, pending: Iterable[str]):
        self.timeout = timeout
        self.pending = list(pending)
        super().__init__(
            f"{len(self.pending)} upload(s) still pending after {timeout}s: "
            + ", ".join(self.pending[:5])
            + (" ..." if len(self.pending) > 5 else "")
        )
