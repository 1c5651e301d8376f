"""
Tourlist Backend - Upload Tests
================================

What we test:
    UploadService (unit):
    ✅ Count, extension and size validation
    ✅ Reported size rejected before the file is read
    ✅ Concurrent upload keeps input order
    ✅ One failure → successful uploads deleted, UpstreamError raised

    POST /upload (API):
    ✅ 0 files → 400, 6 files → 400, 3 files → 200 with 3 descriptors
    ✅ Media failure → 500 and nothing left on the media service
    ✅ Non-admin → 401 before anything is uploaded
"""

import io
from typing import List
from unittest.mock import AsyncMock

import pytest
from fastapi import UploadFile

from app.exceptions import UpstreamError, ValidationError
from app.services.upload_service import UploadService

from conftest import FakeMediaService


def make_upload(filename: str, content: bytes) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


def image_parts(names: List[str], content: bytes):
    return [("images", (name, content, "image/jpeg")) for name in names]


class TestUploadServiceValidation:

    def setup_method(self):
        self.service = UploadService(max_images=5, max_file_size=1024)

    def test_zero_files(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_count(0)
        assert exc_info.value.message == "No images provided"

    def test_too_many_files(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_count(6)
        assert exc_info.value.message == "Maximum 5 images allowed"

    @pytest.mark.parametrize(
        "filename, content_type",
        [("a.jpg", "image/jpeg"), ("B.JPEG", "image/jpeg"), ("c.png", "image/png"),
         ("d.webp", "image/webp"), ("e.gif", "image/gif")],
    )
    def test_allowed_extensions(self, filename, content_type):
        assert self.service.validate_extension(filename) == content_type

    @pytest.mark.parametrize("filename", ["notes.txt", "archive.tar.gz", "noextension", "photo.svg"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError):
            self.service.validate_extension(filename)

    def test_empty_file(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_size("a.jpg", 0)
        assert "empty" in exc_info.value.message

    def test_oversized_file(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_size("a.jpg", 1025)
        assert "exceeds maximum" in exc_info.value.message


class TestUploadServiceBatch:

    def setup_method(self):
        self.service = UploadService(max_images=5, max_file_size=1024 * 1024)
        self.media = FakeMediaService()

    @pytest.mark.asyncio
    async def test_results_follow_input_order(self, sample_image_bytes):
        files = [make_upload(n, sample_image_bytes) for n in ("c.jpg", "a.png", "b.gif")]

        results = await self.service.upload(files, self.media)

        assert [r.public_id for r in results] == ["travel-app/c", "travel-app/a", "travel-app/b"]

    @pytest.mark.asyncio
    async def test_failure_cleans_up_successful_uploads(self, sample_image_bytes):
        self.media.fail_for = {"b.jpg"}
        files = [make_upload(n, sample_image_bytes) for n in ("a.jpg", "b.jpg", "c.jpg")]

        with pytest.raises(UpstreamError) as exc_info:
            await self.service.upload(files, self.media)

        assert exc_info.value.context["failed"] == 1
        assert sorted(self.media.deleted) == ["travel-app/a", "travel-app/c"]

    @pytest.mark.asyncio
    async def test_invalid_file_stops_before_upload(self, sample_image_bytes):
        files = [make_upload("a.jpg", sample_image_bytes), make_upload("b.txt", b"text")]

        with pytest.raises(ValidationError):
            await self.service.upload(files, self.media)

        assert self.media.uploaded == []

    @pytest.mark.asyncio
    async def test_reported_size_checked_before_reading(self):
        upload = UploadFile(file=io.BytesIO(b""), filename="big.jpg", size=2 * 1024 * 1024)
        upload.read = AsyncMock(return_value=b"x" * (2 * 1024 * 1024))

        with pytest.raises(ValidationError) as exc_info:
            await self.service.read_files([upload])

        assert "exceeds maximum" in exc_info.value.message
        upload.read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_read_length_checked_when_size_unreported(self):
        upload = make_upload("a.jpg", b"x" * (1024 * 1024 + 1))
        assert upload.size is None

        with pytest.raises(ValidationError):
            await self.service.read_files([upload])

    @pytest.mark.asyncio
    async def test_none_means_no_images(self):
        with pytest.raises(ValidationError):
            await self.service.upload(None, self.media)


class TestUploadEndpoint:

    @pytest.mark.asyncio
    async def test_no_files(self, client, admin_headers):
        response = await client.post("/upload", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "No images provided"

    @pytest.mark.asyncio
    async def test_six_files(self, client, admin_headers, media, sample_image_bytes):
        names = [f"img{i}.jpg" for i in range(6)]

        response = await client.post(
            "/upload", files=image_parts(names, sample_image_bytes), headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Maximum 5 images allowed"
        assert media.uploaded == []

    @pytest.mark.asyncio
    async def test_three_files(self, client, admin_headers, sample_image_bytes):
        response = await client.post(
            "/upload",
            files=image_parts(["kakum.jpg", "mole.jpg", "labadi.jpg"], sample_image_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 3
        assert body[0] == {
            "url": "https://media.test/travel-app/kakum.jpg",
            "publicId": "travel-app/kakum",
            "width": 800,
            "height": 600,
        }

    @pytest.mark.asyncio
    async def test_media_failure(self, client, admin_headers, media, sample_image_bytes):
        media.fail_for = {"mole.jpg"}

        response = await client.post(
            "/upload",
            files=image_parts(["kakum.jpg", "mole.jpg"], sample_image_bytes),
            headers=admin_headers,
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to upload images"
        assert "details" not in response.json()
        assert media.deleted == ["travel-app/kakum"]

    @pytest.mark.asyncio
    async def test_bad_extension(self, client, admin_headers, media):
        response = await client.post(
            "/upload",
            files=[("images", ("notes.txt", b"hello", "text/plain"))],
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert media.uploaded == []

    @pytest.mark.asyncio
    async def test_oversized_file(self, app, client, admin_headers, media):
        limit = app.state.upload_service.max_file_size

        response = await client.post(
            "/upload",
            files=[("images", ("kakum.jpg", b"\xff" * (limit + 1), "image/jpeg"))],
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert "exceeds maximum" in response.json()["error"]
        assert media.uploaded == []

    @pytest.mark.asyncio
    async def test_user_rejected(self, client, user_headers, media, sample_image_bytes):
        response = await client.post(
            "/upload", files=image_parts(["kakum.jpg"], sample_image_bytes), headers=user_headers
        )

        assert response.status_code == 401
        assert response.json()["code"] == "forbidden"
        assert media.uploaded == []

    @pytest.mark.asyncio
    async def test_guest_rejected(self, client, sample_image_bytes):
        response = await client.post("/upload", files=image_parts(["kakum.jpg"], sample_image_bytes))
        assert response.status_code == 401
