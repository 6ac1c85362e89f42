"""Shared fixtures and fakes for the sitepub test suite."""

import threading
from pathlib import Path

import pytest

from sitepub.exceptions import StorageError
from sitepub.services.command_runner import CommandResult, CommandRunner
from sitepub.services.notification_service import Notifier
from sitepub.services.storage import ObjectMetadata, StorageAccessor


class MemoryStorage(StorageAccessor):
    """Thread-safe in-memory accessor that records every call.

    Attributes:
        objects: key -> (data, content_type)
        calls: Ordered list of ("write" | "remove_all", key_or_prefix)
    """

    def __init__(self, objects=None):
        self.objects = dict(objects or {})
        self.calls = []
        self.fail_writes = {}
        self.fail_remove = None
        self.write_hooks = {}
        self._lock = threading.Lock()

    def write(self, key, data, content_type=None):
        hook = self.write_hooks.get(key)
        if hook is not None:
            hook()
        with self._lock:
            self.calls.append(("write", key))
        if key in self.fail_writes:
            raise self.fail_writes[key]
        with self._lock:
            self.objects[key] = (bytes(data), content_type)

    def remove_all(self, prefix):
        with self._lock:
            self.calls.append(("remove_all", prefix))
        if self.fail_remove is not None:
            raise self.fail_remove
        with self._lock:
            for key in [k for k in self.objects if k.startswith(prefix)]:
                del self.objects[key]

    def list(self, prefix=""):
        with self._lock:
            return sorted(k for k in self.objects if k.startswith(prefix))

    def stat(self, key):
        with self._lock:
            if key not in self.objects:
                raise StorageError(f"No such key: {key}")
            data, content_type = self.objects[key]
        return ObjectMetadata(key=key, size=len(data), content_type=content_type)

    def data(self, key):
        return self.objects[key][0]

    def content_type(self, key):
        return self.objects[key][1]

    def writes(self):
        return [key for op, key in self.calls if op == "write"]


class FakeRunner(CommandRunner):
    """Command runner that records argv and replies from a script.

    ``responses`` maps the first two argv items (e.g. ``("git", "commit")``)
    or the program alone to a CommandResult or an exception to raise.
    """

    def __init__(self, responses=None, on_run=None):
        self.responses = dict(responses or {})
        self.on_run = on_run
        self.calls = []

    def run(self, args, cwd=None, capture_output=False):
        argv = [str(a) for a in args]
        self.calls.append((argv, cwd))
        if self.on_run is not None:
            self.on_run(argv, cwd)

        response = self.responses.get(tuple(argv[:2]), self.responses.get(argv[0]))
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return CommandResult(0)
        return response

    def argvs(self):
        return [argv for argv, _ in self.calls]


class RecordingNotifier(Notifier):
    """Notifier that keeps sent messages, optionally failing."""

    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, message, sound):
        if self.error is not None:
            raise self.error
        self.sent.append((message, sound))


def make_tree(root: Path, files: dict) -> Path:
    """Create *files* (relative path -> bytes or str) under *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        path.write_bytes(content)
    return root


@pytest.fixture
def memory_storage():
    """An empty in-memory accessor."""
    return MemoryStorage()


@pytest.fixture
def site_tree(tmp_path):
    """Small built site: two top-level files and a nested asset."""
    return make_tree(
        tmp_path / "public",
        {
            "index.html": "<h1>home</h1>",
            "a.css": "body{}",
            "img/logo.png": b"\x89PNG",
        },
    )
