"""
Media Storage Tests

Local file system host against a tmp directory, S3 host against a mocked
boto3 client.
"""

import re
import pytest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from src.media.storage import (
    LocalMediaStorage,
    MediaStorageError,
    S3MediaStorage,
    generate_external_id,
)


def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "500", "Message": "backend down"}}, operation)


@pytest.fixture
def local_storage(tmp_path):
    return LocalMediaStorage(base_path=str(tmp_path / "media"))


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def s3_storage(s3_client):
    return S3MediaStorage(
        bucket="portfolio-assets",
        prefix="portfolio/",
        region="eu-west-1",
        public_base_url="https://cdn.example.com/",
        client=s3_client,
    )


# =============================================================================
# EXTERNAL IDS
# =============================================================================

class TestExternalId:

    def test_folder_and_lowercased_extension(self):
        external_id = generate_external_id("images", "Harbour.JPG")
        assert re.fullmatch(r"images/\d+_[0-9a-f]{12}\.jpg", external_id)

    def test_no_filename(self):
        assert re.fullmatch(r"odoo/\d+_[0-9a-f]{12}", generate_external_id("odoo"))

    def test_unique(self):
        assert generate_external_id("images", "a.png") != generate_external_id("images", "a.png")


# =============================================================================
# LOCAL FILE SYSTEM
# =============================================================================

@pytest.mark.asyncio
class TestLocalMediaStorage:

    async def test_upload_writes_file(self, local_storage):
        ref = await local_storage.upload(b"\x89PNG", "shot.png", "image/png", "images")

        assert ref.external_id.startswith("images/")
        assert ref.url == f"/media/{ref.external_id}"
        assert (local_storage.base_path / ref.external_id).read_bytes() == b"\x89PNG"

    async def test_delete_removes_file(self, local_storage):
        ref = await local_storage.upload(b"data", "a.png", "image/png", "images")

        await local_storage.delete(ref.external_id)

        assert not (local_storage.base_path / ref.external_id).exists()

    async def test_delete_missing_file_is_tolerated(self, local_storage):
        await local_storage.delete("images/never-existed.png")

    async def test_delete_requires_external_id(self, local_storage):
        with pytest.raises(MediaStorageError, match="external id is required"):
            await local_storage.delete("")

    async def test_path_stays_under_base(self, local_storage, tmp_path):
        outside = tmp_path / "secret.txt"
        outside.write_text("keep")

        await local_storage.delete("../secret.txt")

        assert outside.exists()
        assert local_storage._get_path("/../../etc/passwd") == local_storage.base_path / "etc/passwd"

    async def test_health_check(self, local_storage):
        health = await local_storage.health_check()

        assert health["healthy"] is True
        assert health["backend"] == "local"


# =============================================================================
# S3
# =============================================================================

@pytest.mark.asyncio
class TestS3MediaStorage:

    async def test_upload_puts_object(self, s3_storage, s3_client):
        ref = await s3_storage.upload(b"%PDF", "cka.pdf", "application/pdf", "certificates")

        s3_client.put_object.assert_called_once_with(
            Bucket="portfolio-assets",
            Key=f"portfolio/{ref.external_id}",
            Body=b"%PDF",
            ContentType="application/pdf",
        )
        assert ref.external_id.startswith("certificates/")
        assert ref.url == f"https://cdn.example.com/portfolio/{ref.external_id}"

    async def test_upload_failure_is_storage_error(self, s3_storage, s3_client):
        s3_client.put_object.side_effect = _client_error("PutObject")

        with pytest.raises(MediaStorageError, match="Failed to upload a.png"):
            await s3_storage.upload(b"x", "a.png", "image/png", "images")

    async def test_delete_uses_prefixed_key(self, s3_storage, s3_client):
        await s3_storage.delete("images/1_abc.png")

        s3_client.delete_object.assert_called_once_with(
            Bucket="portfolio-assets",
            Key="portfolio/images/1_abc.png",
        )

    async def test_delete_failure_is_storage_error(self, s3_storage, s3_client):
        s3_client.delete_object.side_effect = _client_error("DeleteObject")

        with pytest.raises(MediaStorageError, match="Failed to delete images/1_abc.png"):
            await s3_storage.delete("images/1_abc.png")

    async def test_delete_requires_external_id(self, s3_storage, s3_client):
        with pytest.raises(MediaStorageError):
            await s3_storage.delete("")
        s3_client.delete_object.assert_not_called()

    async def test_default_public_url(self, s3_client):
        storage = S3MediaStorage(bucket="assets", prefix="", region="us-east-1", client=s3_client)

        ref = await storage.upload(b"x", "a.png", "image/png", "images")

        assert ref.url == f"https://assets.s3.us-east-1.amazonaws.com/{ref.external_id}"

    async def test_health_check_reports_error(self, s3_storage, s3_client):
        s3_client.head_bucket.side_effect = _client_error("HeadBucket")

        health = await s3_storage.health_check()

        assert health["healthy"] is False
        assert health["bucket"] == "portfolio-assets"


class TestS3Config:

    def test_bucket_required(self, monkeypatch):
        monkeypatch.delenv("MEDIA_S3_BUCKET", raising=False)
        with pytest.raises(ValueError, match="S3 bucket not specified"):
            S3MediaStorage(client=MagicMock())
