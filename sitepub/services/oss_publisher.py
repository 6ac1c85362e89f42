"""
Object-storage publishing of the built site.
"""
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import PublishError
from ..models.workflow_config import OssDeployConfig
from ..utils.config_loader import ConfigLoader
from ..utils.logger import get_logger
from .storage import ContentTypeLayer, S3Storage, StorageAccessor
from .sync import DEFAULT_MAX_UPLOAD_WORKERS, DirectoryMirror, UploadTaskSet

log = get_logger(__name__)

StorageFactory = Callable[[bool], StorageAccessor]


def build_oss_storage(config: OssDeployConfig, for_draft: bool) -> StorageAccessor:
    """Create the bucket accessor for a deployment variant.

    Bucket and endpoint are read from the variant's environment
    variables; the returned accessor infers content types.

    Raises:
        ConfigError: If a variable or credential is missing
    """
    bucket, endpoint = ConfigLoader.oss_target(for_draft)
    log.info("Initializing storage client for bucket %s", bucket)

    storage = S3Storage(
        bucket=bucket,
        root=config.sync.root,
        endpoint_url=endpoint,
        access_key_id=config.access_key_id,
        access_key_secret=config.access_key_secret,
        region=config.region,
        max_pool_connections=config.max_concurrency or DEFAULT_MAX_UPLOAD_WORKERS,
    )
    return ContentTypeLayer(storage)


class OssPublisher:
    """Uploads single files and mirrors directories of a build.

    Args:
        config: Object-storage settings with credentials filled in
        storage_factory: Builds the accessor for a variant; defaults to
            :func:`build_oss_storage`
    """

    def __init__(self, config: OssDeployConfig, storage_factory: Optional[StorageFactory] = None):
        self.config = config
        self.storage_factory = storage_factory or (
            lambda for_draft: build_oss_storage(config, for_draft)
        )

    @property
    def max_workers(self) -> int:
        return self.config.max_concurrency or DEFAULT_MAX_UPLOAD_WORKERS

    def publish(self, public_dir, for_draft: bool) -> int:
        """Publish the configured files and directories of *public_dir*.

        Args:
            public_dir: Freshly built site directory
            for_draft: Target the draft bucket instead of production

        Returns:
            Total number of objects uploaded

        Raises:
            PublishError: If *public_dir* does not exist
            StorageError: From the upload batch or any directory mirror
        """
        public_dir = Path(public_dir)
        log.info("Deploying oss %s", "draft" if for_draft else "prod")

        if not public_dir.is_dir():
            raise PublishError(f"Build output not found: {public_dir}")

        storage = self.storage_factory(for_draft)
        sync = self.config.sync
        timeout = self.config.join_timeout

        log.info("Uploading files...")
        with UploadTaskSet(storage, max_workers=self.max_workers) as files:
            files.push_many(sync.files, root=public_dir)
            uploaded = files.join(timeout=timeout)

        log.info("Syncing directories...")
        mirror = DirectoryMirror(storage, max_workers=self.max_workers, timeout=timeout)
        for directory in sync.dirs:
            log.info("Syncing directory: %s", directory)
            result = mirror.mirror(public_dir / directory, directory)
            uploaded += result.tasks_attempted

        return uploaded
