"""
S3-compatible object storage backend.

Works against AWS S3 and S3-compatible services such as Aliyun OSS
(pass the service endpoint as ``endpoint_url``). A single boto3 client
is created per accessor; boto3 clients are thread-safe, so the accessor
can be shared by every upload worker.
"""
from typing import List, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ...exceptions import StorageError
from ...utils.logger import get_logger
from .base import ObjectMetadata, StorageAccessor

log = get_logger(__name__)

# delete_objects accepts at most 1000 keys per request
_DELETE_BATCH_SIZE = 1000


def normalize_endpoint(endpoint: Optional[str]) -> Optional[str]:
    """Prefix a bare host name with ``https://``.

    Example:
        >>> normalize_endpoint("oss-cn-hangzhou.aliyuncs.com")
        'https://oss-cn-hangzhou.aliyuncs.com'
    """
    if not endpoint:
        return None
    endpoint = endpoint.strip()
    if "://" not in endpoint:
        endpoint = f"https://{endpoint}"
    return endpoint.rstrip("/")


class S3Storage(StorageAccessor):
    """Storage accessor backed by an S3 bucket.

    Args:
        bucket: Bucket name
        root: Key prefix inside the bucket that acts as the namespace root
        endpoint_url: Service endpoint (None for AWS default)
        access_key_id: Access key ID (None to use the default credential chain)
        access_key_secret: Secret access key
        region: Region name
        max_pool_connections: HTTP connection pool size; match it to the
            upload concurrency so workers do not queue on the pool
        connect_timeout: Seconds to wait for a connection
        read_timeout: Seconds to wait for a response
        client: Pre-built client (tests)
    """

    def __init__(
        self,
        bucket: str,
        root: str = "",
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        access_key_secret: Optional[str] = None,
        region: Optional[str] = None,
        max_pool_connections: int = 16,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0,
        client=None,
    ):
        self.bucket = bucket
        self.root = root.strip("/")

        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=access_key_id,
                aws_secret_access_key=access_key_secret,
                region_name=region,
            )
            client = session.client(
                "s3",
                endpoint_url=normalize_endpoint(endpoint_url),
                config=BotoConfig(
                    s3={"addressing_style": "virtual"},
                    connect_timeout=connect_timeout,
                    read_timeout=read_timeout,
                    retries={"max_attempts": 3, "mode": "standard"},
                    max_pool_connections=max_pool_connections,
                ),
            )
        self.s3_client = client

    # ── Key mapping ────────────────────────────────────────────────────

    def _full_key(self, key: str) -> str:
        key = key.lstrip("/")
        return f"{self.root}/{key}" if self.root else key

    def _strip_root(self, full_key: str) -> str:
        if self.root:
            return full_key[len(self.root) + 1:]
        return full_key

    def _iter_full_keys(self, prefix: str):
        paginator = self.s3_client.get_paginator("list_objects_v2")
        pages = paginator.paginate(Bucket=self.bucket, Prefix=self._full_key(prefix))
        for page in pages:
            for obj in page.get("Contents", []):
                yield obj["Key"]

    # ── StorageAccessor ────────────────────────────────────────────────

    def write(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        params = {"Bucket": self.bucket, "Key": self._full_key(key), "Body": data}
        if content_type:
            params["ContentType"] = content_type

        try:
            self.s3_client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"put_object {params['Key']} failed: {e}") from e

    def remove_all(self, prefix: str) -> None:
        try:
            keys = list(self._iter_full_keys(prefix))
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Listing '{prefix}' failed: {e}") from e

        if not keys:
            log.debug("Nothing to delete under '%s'", prefix)
            return

        log.info("Deleting %d object(s) under '%s'", len(keys), prefix)

        for start in range(0, len(keys), _DELETE_BATCH_SIZE):
            batch = keys[start:start + _DELETE_BATCH_SIZE]
            try:
                response = self.s3_client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
                )
            except (BotoCoreError, ClientError) as e:
                raise StorageError(f"delete_objects under '{prefix}' failed: {e}") from e

            errors = response.get("Errors") or []
            if errors:
                first = errors[0]
                raise StorageError(
                    f"{len(errors)} object(s) under '{prefix}' were not deleted; "
                    f"first: {first.get('Key')} ({first.get('Code')}: {first.get('Message')})"
                )

    def list(self, prefix: str = "") -> List[str]:
        try:
            return sorted(self._strip_root(k) for k in self._iter_full_keys(prefix))
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Listing '{prefix}' failed: {e}") from e

    def stat(self, key: str) -> ObjectMetadata:
        try:
            response = self.s3_client.head_object(Bucket=self.bucket, Key=self._full_key(key))
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"head_object {key} failed: {e}") from e

        return ObjectMetadata(
            key=key,
            size=response.get("ContentLength", 0),
            content_type=response.get("ContentType") or None,
        )
