"""MinIO implementation of the StorageClient interface."""

import os

from minio import Minio
from remux_common import (
    StorageDeleteError,
    StorageDownloadError,
    StorageUploadError,
    setup_logging,
)
from remux_common.infrastructure import StorageClient

logger = setup_logging()

CONTENT_TYPES = {
    ".flv": "video/x-flv",
    ".mp4": "video/mp4",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class MinioStorageClient(StorageClient):
    """Handles file storage operations for a single MinIO bucket."""

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self._bucket_name = bucket_name

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def download(self, object_name: str, local_path: str) -> None:
        extra = {
            "bucket_name": self._bucket_name,
            "object_name": object_name,
            "local_path": str(local_path),
        }
        logger.info("Starting download", extra=extra)
        try:
            os.makedirs(os.path.dirname(os.path.abspath(local_path)), exist_ok=True)
            stat = self._client.fget_object(
                bucket_name=self._bucket_name,
                object_name=object_name,
                file_path=str(local_path),
            )
        except Exception as e:
            logger.exception("MinIO download failed", extra=extra)
            raise StorageDownloadError(object_name, e) from e

        logger.info(
            "File downloaded from MinIO",
            extra={**extra, "bytes": getattr(stat, "size", None)},
        )

    def upload(self, object_name: str, local_path: str) -> None:
        extension = os.path.splitext(str(local_path))[1].lower()
        try:
            self._client.fput_object(
                bucket_name=self._bucket_name,
                object_name=object_name,
                file_path=str(local_path),
                content_type=CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE),
            )
            logger.info(
                "File uploaded to MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={
                    "bucket_name": self._bucket_name,
                    "object_name": object_name,
                    "local_path": str(local_path),
                },
            )
            raise StorageUploadError(object_name, e) from e

    def delete(self, object_name: str) -> None:
        try:
            self._client.remove_object(
                bucket_name=self._bucket_name, object_name=object_name
            )
            logger.info(
                "Object removed from MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
        except Exception as e:
            logger.exception(
                "MinIO delete failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDeleteError(object_name, e) from e

    def ensure_bucket_exists(self) -> None:
        if not self._client.bucket_exists(bucket_name=self._bucket_name):
            self._client.make_bucket(bucket_name=self._bucket_name)
            logger.info("Bucket created", extra={"bucket_name": self._bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": self._bucket_name})
