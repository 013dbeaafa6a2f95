"""
Media Storage Backends

Uploaded media (certificate PDFs, images, screenshots) lives on an external
host. Entities only keep a MediaReference: the public ``url`` clients
consume and the ``external_id`` needed to delete the asset later.
"""

import os
import logging
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

IMAGE_CONTENT_PREFIX = "image/"
PDF_CONTENT_TYPE = "application/pdf"


class MediaStorageError(Exception):
    """Upload or delete failed at the media host."""
    pass


@dataclass(frozen=True)
class MediaReference:
    """Pointer to an asset on the media host."""
    url: str
    external_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "externalId": self.external_id}

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["MediaReference"]:
        if not isinstance(data, dict) or not data.get("externalId"):
            return None
        return cls(url=data.get("url", ""), external_id=data["externalId"])


def generate_external_id(folder: str, filename: str = "") -> str:
    """``<folder>/<timestamp>_<random>`` keeping the original extension."""
    suffix = Path(filename).suffix.lower() if filename else ""
    return f"{folder}/{int(time.time() * 1000)}_{secrets.token_hex(6)}{suffix}"


class MediaStorage(ABC):
    """Abstract base class for media hosts."""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        folder: str,
    ) -> MediaReference:
        """Store an asset. Raises MediaStorageError on failure."""
        pass

    @abstractmethod
    async def delete(self, external_id: str) -> None:
        """Remove an asset. Raises MediaStorageError on failure."""
        pass

    async def health_check(self) -> Dict:
        return {"healthy": True, "backend": type(self).__name__}


class LocalMediaStorage(MediaStorage):
    """
    File system media host.

    Files are written under ``base_path`` and served by the API at
    ``public_prefix`` (``/media`` by default).
    """

    def __init__(
        self,
        base_path: Optional[str] = None,
        public_prefix: str = "/media",
    ):
        if base_path is None:
            base_path = os.getenv("MEDIA_STORAGE_PATH", "media")

        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_prefix = public_prefix.rstrip("/")

        logger.info(f"LocalMediaStorage initialized at {self.base_path}")

    def _get_path(self, external_id: str) -> Path:
        """Get full path for an external id."""
        safe_key = external_id.replace("..", "").lstrip("/")
        return self.base_path / safe_key

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> MediaReference:
        external_id = generate_external_id(folder, filename)
        path = self._get_path(external_id)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise MediaStorageError(f"Failed to store {filename}: {e}") from e

        logger.debug(f"Saved media to {path} ({len(data)} bytes)")
        return MediaReference(url=f"{self.public_prefix}/{external_id}", external_id=external_id)

    async def delete(self, external_id: str) -> None:
        if not external_id:
            raise MediaStorageError("Valid external id is required for deletion")

        path = self._get_path(external_id)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"Media already absent: {path}")
        except OSError as e:
            raise MediaStorageError(f"Failed to delete {external_id}: {e}") from e
        else:
            logger.debug(f"Deleted media {path}")

    async def health_check(self) -> Dict:
        return {
            "healthy": self.base_path.is_dir(),
            "backend": "local",
            "path": str(self.base_path),
        }


class S3MediaStorage(MediaStorage):
    """
    AWS S3 media host.

    Requires boto3 and AWS credentials. Objects are public-read through
    ``MEDIA_PUBLIC_BASE_URL`` (e.g. a CDN in front of the bucket) or the
    bucket's virtual-hosted URL.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        prefix: Optional[str] = None,
        region: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client=None,
    ):
        import boto3
        from botocore.config import Config

        self.bucket = bucket or os.getenv("MEDIA_S3_BUCKET")
        if not self.bucket:
            raise ValueError("S3 bucket not specified")

        self.prefix = prefix if prefix is not None else os.getenv("MEDIA_S3_PREFIX", "portfolio/")
        self.region = region or os.getenv("MEDIA_S3_REGION", "us-east-1")
        self.public_base_url = (
            public_base_url
            or os.getenv("MEDIA_PUBLIC_BASE_URL")
            or f"https://{self.bucket}.s3.{self.region}.amazonaws.com"
        ).rstrip("/")

        if client is None:
            config = Config(
                region_name=self.region,
                retries={"max_attempts": 1},
            )
            client = boto3.client("s3", config=config)
        self.s3 = client
        logger.info(f"S3MediaStorage initialized for bucket {self.bucket}")

    def _get_key(self, external_id: str) -> str:
        """Get full S3 key with prefix."""
        return f"{self.prefix}{external_id}"

    async def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> MediaReference:
        from botocore.exceptions import BotoCoreError, ClientError

        external_id = generate_external_id(folder, filename)
        s3_key = self._get_key(external_id)

        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=s3_key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise MediaStorageError(f"Failed to upload {filename}: {e}") from e

        logger.debug(f"Uploaded media to s3://{self.bucket}/{s3_key}")
        return MediaReference(url=f"{self.public_base_url}/{s3_key}", external_id=external_id)

    async def delete(self, external_id: str) -> None:
        from botocore.exceptions import BotoCoreError, ClientError

        if not external_id:
            raise MediaStorageError("Valid external id is required for deletion")

        s3_key = self._get_key(external_id)
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=s3_key)
        except (BotoCoreError, ClientError) as e:
            raise MediaStorageError(f"Failed to delete {external_id}: {e}") from e

        logger.debug(f"Deleted media s3://{self.bucket}/{s3_key}")

    async def health_check(self) -> Dict:
        try:
            self.s3.head_bucket(Bucket=self.bucket)
            return {"healthy": True, "backend": "s3", "bucket": self.bucket}
        except Exception as e:
            return {"healthy": False, "backend": "s3", "bucket": self.bucket, "error": str(e)}


_media_storage: Optional[MediaStorage] = None


def get_media_storage() -> MediaStorage:
    """
    Get the configured media host.

    Returns LocalMediaStorage by default, S3MediaStorage if MEDIA_S3_BUCKET is set.
    """
    global _media_storage

    if _media_storage is None:
        if os.getenv("MEDIA_S3_BUCKET"):
            _media_storage = S3MediaStorage()
        else:
            _media_storage = LocalMediaStorage()
    return _media_storage
