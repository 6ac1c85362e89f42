"""Tests for the object-storage publisher."""

import pytest

from sitepub.exceptions import LocalReadError, PublishError
from sitepub.models import OssDeployConfig, OssSyncConfig
from sitepub.services.oss_publisher import OssPublisher, build_oss_storage
from sitepub.services.storage import ContentTypeLayer, S3Storage
from sitepub.services.sync import DEFAULT_MAX_UPLOAD_WORKERS
from sitepub.utils.config_loader import ENV_OSS_PROD_BUCKET, ENV_OSS_PROD_ENDPOINT

from .conftest import MemoryStorage, make_tree


class TestOssPublisher:
    """Test OssPublisher.publish."""

    @pytest.fixture
    def public(self, tmp_path):
        return make_tree(
            tmp_path / "public",
            {
                "index.html": "home",
                "sitemap.xml": "<urlset/>",
                "css/main.css": "body{}",
                "posts/hello/index.html": "hello",
                "drafts/skip.html": "not published",
            },
        )

    @pytest.fixture
    def config(self):
        return OssDeployConfig(
            sync=OssSyncConfig(root="/", files=["index.html", "sitemap.xml"], dirs=["css", "posts"]),
            max_concurrency=4,
        )

    def test_publish_files_and_dirs(self, config, public):
        """Test that files are uploaded and dirs mirrored."""
        storage = MemoryStorage({"css/old.css": (b"old", None), "keep.txt": (b"k", None)})
        requested = []

        def factory(for_draft):
            requested.append(for_draft)
            return storage

        uploaded = OssPublisher(config, storage_factory=factory).publish(public, for_draft=True)

        assert uploaded == 4
        assert requested == [True]
        assert storage.list() == [
            "css/main.css",
            "index.html",
            "keep.txt",
            "posts/hello/index.html",
            "sitemap.xml",
        ]
        assert ("remove_all", "css/") in storage.calls
        assert ("remove_all", "posts/") in storage.calls

    def test_missing_public_dir(self, config, tmp_path):
        """Test that a missing build output is refused."""
        publisher = OssPublisher(config, storage_factory=lambda _: MemoryStorage())
        with pytest.raises(PublishError):
            publisher.publish(tmp_path / "public", for_draft=False)

    def test_missing_listed_file(self, config, public):
        """Test that a configured file absent from the build uploads nothing."""
        config.sync.files.append("robots.txt")
        storage = MemoryStorage()

        with pytest.raises(LocalReadError):
            OssPublisher(config, storage_factory=lambda _: storage).publish(public, False)
        assert storage.calls == []

    def test_max_workers_default(self, config):
        config.max_concurrency = None
        assert OssPublisher(config).max_workers == DEFAULT_MAX_UPLOAD_WORKERS

    def test_build_oss_storage(self, config, monkeypatch):
        """Test the production accessor is a typed S3 bucket."""
        monkeypatch.setenv(ENV_OSS_PROD_BUCKET, "prod-bucket")
        monkeypatch.setenv(ENV_OSS_PROD_ENDPOINT, "oss-cn-hangzhou.aliyuncs.com")
        config.access_key_id = "id"
        config.access_key_secret = "secret"
        config.region = "oss-cn-hangzhou"

        storage = build_oss_storage(config, for_draft=False)

        assert isinstance(storage, ContentTypeLayer)
        assert isinstance(storage.inner, S3Storage)
        assert storage.inner.bucket == "prod-bucket"
        assert storage.inner.root == ""
