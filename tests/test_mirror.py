"""Tests for directory mirroring."""

import os
import sys
import time

import pytest

from sitepub.exceptions import (
    LocalReadError,
    RemoteDeleteError,
    RemoteWriteError,
    StorageError,
)
from sitepub.services.storage import ContentTypeLayer, LocalStorage
from sitepub.services.sync import DirectoryMirror, MirrorResult, mirror_directory

from .conftest import MemoryStorage, make_tree


class TestDirectoryMirror:
    """Test DirectoryMirror.mirror semantics."""

    @pytest.fixture
    def storage(self):
        return MemoryStorage()

    def test_scenario_site_prefix(self, storage, tmp_path):
        """Test the canonical html + image mirror under a prefix."""
        root = make_tree(
            tmp_path / "build",
            {"index.html": "<html>ok</html>", "img/logo.png": b"\x89PNG\r\n\x1a\n"},
        )

        result = mirror_directory(ContentTypeLayer(storage), root, "site")

        assert result == MirrorResult(tasks_attempted=2)
        assert storage.list() == ["site/img/logo.png", "site/index.html"]
        assert storage.content_type("site/index.html") == "text/html"
        assert storage.data("site/img/logo.png") == b"\x89PNG\r\n\x1a\n"

    def test_completeness(self, storage, tmp_path):
        """Test that every file becomes exactly one object at its relative path."""
        files = {
            "a.txt": "a",
            "b/c.txt": "c",
            "b/d/e.txt": "e",
            "b/d/f/g.bin": b"\x00\x01",
        }
        root = make_tree(tmp_path / "tree", files)

        result = DirectoryMirror(storage).mirror(root, "p")

        assert result.tasks_attempted == len(files)
        assert storage.list("p/") == sorted(f"p/{k}" for k in files)
        for rel, content in files.items():
            expected = content.encode() if isinstance(content, str) else content
            assert storage.data(f"p/{rel}") == expected

    def test_empty_tree(self, storage, tmp_path):
        """Test that an empty tree succeeds and clears the prefix."""
        root = tmp_path / "empty"
        (root / "nested" / "deeper").mkdir(parents=True)
        storage.objects["p/old.txt"] = (b"old", None)

        result = DirectoryMirror(storage).mirror(root, "p")

        assert result.tasks_attempted == 0
        assert storage.list("p/") == []
        assert storage.writes() == []

    def test_stale_objects_removed(self, storage, site_tree):
        """Test that objects not in the local tree do not survive."""
        storage.objects["css/stale.css"] = (b"old", "text/css")
        storage.objects["css/index.html"] = (b"old", "text/html")

        DirectoryMirror(storage).mirror(site_tree, "css")

        assert storage.list("css/") == ["css/a.css", "css/img/logo.png", "css/index.html"]
        assert storage.data("css/index.html") == b"<h1>home</h1>"

    def test_sibling_prefix_untouched(self, storage, site_tree):
        """Test that mirroring 'css' leaves 'css2/...' alone."""
        storage.objects["css2/keep.css"] = (b"keep", None)
        storage.objects["other.txt"] = (b"keep", None)

        DirectoryMirror(storage).mirror(site_tree, "css")

        assert ("remove_all", "css/") in storage.calls
        assert storage.data("css2/keep.css") == b"keep"
        assert storage.data("other.txt") == b"keep"

    def test_empty_prefix_mirrors_whole_namespace(self, storage, site_tree):
        """Test that an empty prefix clears and fills the namespace root."""
        storage.objects["stale.txt"] = (b"x", None)

        DirectoryMirror(storage).mirror(site_tree, "")

        assert storage.calls[0] == ("remove_all", "")
        assert storage.list() == ["a.css", "img/logo.png", "index.html"]

    def test_prefix_slashes_normalised(self, storage, site_tree):
        """Test that leading and trailing slashes on the prefix are ignored."""
        DirectoryMirror(storage).mirror(site_tree, "/blog/")

        assert storage.calls[0] == ("remove_all", "blog/")
        assert "blog/index.html" in storage.list()

    def test_delete_precedes_uploads(self, storage, site_tree):
        """Test that the prefix is cleared before the first write."""
        DirectoryMirror(storage).mirror(site_tree, "p")

        ops = [op for op, _ in storage.calls]
        assert ops[0] == "remove_all"
        assert ops.count("remove_all") == 1
        assert ops[1:] == ["write"] * 3

    def test_remirror_is_idempotent(self, storage, site_tree):
        """Test that mirroring twice equals mirroring once."""
        DirectoryMirror(storage).mirror(site_tree, "p")
        first = dict(storage.objects)

        DirectoryMirror(storage).mirror(site_tree, "p")

        assert storage.objects == first

    def test_content_type_fallback(self, storage, tmp_path):
        """Test html gets a type and unknown extensions get none."""
        root = make_tree(tmp_path / "t", {"index.html": "x", "data.unknownext": "y"})

        DirectoryMirror(ContentTypeLayer(storage)).mirror(root, "")

        assert storage.content_type("index.html") == "text/html"
        assert storage.content_type("data.unknownext") is None

    def test_missing_local_root(self, storage, tmp_path):
        """Test that a missing directory fails before touching storage."""
        with pytest.raises(LocalReadError):
            DirectoryMirror(storage).mirror(tmp_path / "nope", "p")
        assert storage.calls == []

    def test_local_root_is_file(self, storage, tmp_path):
        """Test that a regular file is not accepted as the root."""
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(LocalReadError):
            DirectoryMirror(storage).mirror(path, "p")
        assert storage.calls == []

    def test_delete_failure_uploads_nothing(self, storage, site_tree):
        """Test that a failed prefix delete stops the mirror."""
        storage.fail_remove = StorageError("denied")

        with pytest.raises(RemoteDeleteError) as exc_info:
            DirectoryMirror(storage).mirror(site_tree, "p")

        assert exc_info.value.prefix == "p/"
        assert storage.writes() == []

    def test_write_failure_leaves_partial_state(self, storage, site_tree):
        """Test that a failed upload is reported after the others land."""
        storage.fail_writes["p/a.css"] = StorageError("quota")

        with pytest.raises(RemoteWriteError) as exc_info:
            DirectoryMirror(storage).mirror(site_tree, "p")

        assert exc_info.value.key == "p/a.css"
        assert storage.list("p/") == ["p/img/logo.png", "p/index.html"]

    def test_mirror_into_local_storage(self, tmp_path, site_tree):
        """Test mirroring end to end into a directory backend."""
        dest = tmp_path / "dest"
        make_tree(dest, {"p/old.txt": "old", "keep/x.txt": "x"})
        storage = LocalStorage(dest)

        result = mirror_directory(storage, site_tree, "p", max_workers=2)

        assert result.tasks_attempted == 3
        assert storage.list("p/") == ["p/a.css", "p/img/logo.png", "p/index.html"]
        assert (dest / "keep" / "x.txt").read_text() == "x"
        assert (dest / "p" / "img" / "logo.png").read_bytes() == b"\x89PNG"

    @pytest.mark.parametrize("workers", [0, -1])
    def test_invalid_worker_count_touches_nothing(self, storage, site_tree, workers):
        """Test that a bad concurrency limit is rejected before the delete."""
        storage.objects["p/keep.txt"] = (b"keep", None)

        with pytest.raises(ValueError, match="max_workers"):
            mirror_directory(storage, site_tree, "p", max_workers=workers)

        assert storage.calls == []
        assert storage.data("p/keep.txt") == b"keep"

    @pytest.mark.skipif(sys.platform == "win32", reason="needs symlinks")
    def test_unreadable_file_after_delete_cancels_queued(self, storage, tmp_path):
        """Test a read failure midway: the error propagates, queued uploads are dropped."""
        root = make_tree(tmp_path / "t", {"a.txt": "a", "b.txt": "b"})
        os.symlink(tmp_path / "missing-target", root / "z.txt")
        storage.write_hooks["p/a.txt"] = lambda: time.sleep(0.3)

        with pytest.raises(LocalReadError) as exc_info:
            DirectoryMirror(storage, max_workers=1).mirror(root, "p")

        assert exc_info.value.path.endswith("z.txt")
        assert storage.calls[0] == ("remove_all", "p/")
        assert "p/b.txt" not in storage.writes()
        assert "p/z.txt" not in storage.writes()
