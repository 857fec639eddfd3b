"""
Tests for photo storage backends.
"""

import pytest
from botocore.exceptions import ClientError

from flipdesk.services.storage import (
    LocalPhotoStorage,
    S3PhotoStorage,
    StorageError,
    build_photo_key,
    photo_extension,
)


class FakeS3Client:
    """Records calls instead of talking to S3."""

    def __init__(self, fail=False):
        self.fail = fail
        self.puts = []
        self.deletes = []

    def put_object(self, **kwargs):
        if self.fail:
            raise ClientError(
                {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
            )
        self.puts.append(kwargs)

    def delete_object(self, **kwargs):
        self.deletes.append(kwargs)


class TestKeys:
    """Test object key helpers."""

    def test_photo_extension(self):
        assert photo_extension("Kitchen.JPG") == "jpg"
        assert photo_extension("archive.tar.gz") == "gz"
        assert photo_extension("noext") == ""
        assert photo_extension(None) == ""

    def test_build_photo_key(self):
        key = build_photo_key("prop-1", 2, "png")
        assert key.startswith("prop-1/")
        assert key.endswith("-2.png")


class TestLocalPhotoStorage:
    """Test filesystem storage."""

    def test_upload_writes_file_and_returns_url(self, tmp_path):
        storage = LocalPhotoStorage(str(tmp_path), "/media/")
        url = storage.upload("prop-1/1-0.jpg", b"jpegdata", "image/jpeg")

        assert url == "/media/prop-1/1-0.jpg"
        assert (tmp_path / "prop-1" / "1-0.jpg").read_bytes() == b"jpegdata"

    def test_delete_removes_file(self, tmp_path):
        storage = LocalPhotoStorage(str(tmp_path), "/media")
        storage.upload("prop-1/1-0.jpg", b"jpegdata")
        storage.delete("prop-1/1-0.jpg")
        storage.delete("prop-1/1-0.jpg")  # already gone

        assert not (tmp_path / "prop-1" / "1-0.jpg").exists()

    def test_rejects_keys_outside_root(self, tmp_path):
        storage = LocalPhotoStorage(str(tmp_path / "media"), "/media")
        with pytest.raises(StorageError):
            storage.upload("../escape.jpg", b"data")


class TestS3PhotoStorage:
    """Test S3 storage with a fake client."""

    def test_upload_returns_public_url(self):
        client = FakeS3Client()
        storage = S3PhotoStorage("flip-photos", "us-west-2", client=client)

        url = storage.upload("prop-1/1-0.jpg", b"jpegdata", "image/jpeg")

        assert url == "https://flip-photos.s3.us-west-2.amazonaws.com/prop-1/1-0.jpg"
        assert client.puts == [{
            "Bucket": "flip-photos",
            "Key": "prop-1/1-0.jpg",
            "Body": b"jpegdata",
            "ContentType": "image/jpeg",
        }]

    def test_custom_public_base_url(self):
        storage = S3PhotoStorage(
            "flip-photos", "us-west-2", public_base_url="https://cdn.example.com/", client=FakeS3Client()
        )
        assert storage.upload("k.png", b"x") == "https://cdn.example.com/k.png"

    def test_upload_failure_raises_storage_error(self):
        storage = S3PhotoStorage("flip-photos", "us-west-2", client=FakeS3Client(fail=True))
        with pytest.raises(StorageError):
            storage.upload("prop-1/1-0.jpg", b"jpegdata")

    def test_delete(self):
        client = FakeS3Client()
        S3PhotoStorage("flip-photos", "us-west-2", client=client).delete("k.png")
        assert client.deletes == [{"Bucket": "flip-photos", "Key": "k.png"}]

    def test_bucket_required(self):
        with pytest.raises(StorageError):
            S3PhotoStorage("", "us-west-2", client=FakeS3Client())
