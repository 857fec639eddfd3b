"""
Object storage for listing photos.

Backends return a public URL for every stored object. The local backend
writes under MEDIA_ROOT and is served by the app's static mount; the S3
backend uploads with boto3.
"""

import logging
import time
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from flipdesk.config import get_settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object cannot be stored or removed."""


def photo_extension(filename: Optional[str]) -> str:
    """Lower-cased extension of an uploaded file name ('' if none)."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def build_photo_key(property_id: str, index: int, extension: str) -> str:
    """Object key for a listing photo: {property_id}/{millis}-{index}.{ext}"""
    millis = int(time.time() * 1000)
    return f"{property_id}/{millis}-{index}.{extension}"


class PhotoStorage:
    """Interface for photo storage backends."""

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store data under key and return its public URL."""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        """Remove the object stored under key, if any."""
        raise NotImplementedError


class LocalPhotoStorage(PhotoStorage):
    """Stores photos on the local filesystem."""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StorageError(f"Invalid storage key: {key}")
        return path

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not write {key}: {e}") from e

        logger.info(f"Stored photo {key} ({len(data)} bytes) on local disk")
        return f"{self.base_url}/{key}"

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Could not delete {key}: {e}") from e


class S3PhotoStorage(PhotoStorage):
    """Stores photos in a public-read S3 bucket."""

    def __init__(
        self,
        bucket: str,
        region: str,
        public_base_url: Optional[str] = None,
        client=None,
    ):
        if not bucket:
            raise StorageError("S3_BUCKET must be set for the s3 storage backend")
        self.bucket = bucket
        self.region = region
        self.public_base_url = (
            public_base_url or f"https://{bucket}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self.client = client or boto3.client("s3", region_name=region)

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"S3 upload failed for {key}: {e}") from e

        logger.info(f"Uploaded photo s3://{self.bucket}/{key}")
        return f"{self.public_base_url}/{key}"

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"S3 delete failed for {key}: {e}") from e


# Singleton instance
_photo_storage: Optional[PhotoStorage] = None


def get_photo_storage() -> PhotoStorage:
    """Get the configured photo storage backend."""
    global _photo_storage
    if _photo_storage is None:
        settings = get_settings()
        if settings.storage_backend == "s3":
            _photo_storage = S3PhotoStorage(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                public_base_url=settings.s3_public_base_url or None,
            )
        else:
            _photo_storage = LocalPhotoStorage(settings.media_root, settings.media_url)
    return _photo_storage
