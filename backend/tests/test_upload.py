"""
Plant API — Upload Relay Tests
===============================

What we test:
    ✅ Missing file, non-image and oversized files → 400, media host untouched
    ✅ Missing identifiers → 400 listing all four, media host untouched
    ✅ Destination folder / public id built from the form fields
    ✅ Valid upload → 200 with imageUrl and publicId
    ✅ Media host failure → 500
"""

import io
from unittest.mock import AsyncMock

import pytest
from starlette.datastructures import Headers, UploadFile

from plant_api.exceptions import MediaHostError, UploadError, ValidationError
from plant_api.services.media_base import UploadResult
from plant_api.services.upload_service import UploadService

FORM = {
    "plantCode": "P-17",
    "communityName": "Mekar",
    "communityMemberId": "00000001",
    "uploadFolder": "APP_PLANT_PHOTO",
}


def _upload_file(content: bytes, content_type: str, filename: str = "leaf.jpg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestUploadService:

    def setup_method(self):
        self.host = AsyncMock()
        self.host.upload_image.return_value = UploadResult(url="https://example.test/p.jpg", public_id="p")
        self.service = UploadService(self.host, max_file_size=1024, clock=lambda: 1700000000000)

    def test_build_destination(self):
        folder, public_id = self.service.build_destination("P-17", "Mekar", "00000001", "APP_PLANT_PHOTO")

        assert folder == "Mekar/00000001/APP_PLANT_PHOTO"
        assert public_id == "P-17_1700000000000"

    @pytest.mark.asyncio
    async def test_reads_at_most_limit_plus_one(self):
        file = _upload_file(b"x" * 5000, "image/png")

        with pytest.raises(UploadError):
            await self.service.read_bounded(file)

        assert file.file.tell() == 1025

    @pytest.mark.asyncio
    async def test_recorded_size_rejects_without_reading(self):
        file = UploadFile(
            file=io.BytesIO(b"x" * 5000),
            size=5000,
            filename="big.png",
            headers=Headers({"content-type": "image/png"}),
        )

        with pytest.raises(UploadError) as exc_info:
            await self.service.read_bounded(file)

        assert exc_info.value.context["size"] == 5000
        assert file.file.tell() == 0

    @pytest.mark.asyncio
    async def test_exact_limit_is_accepted(self):
        content = await self.service.read_bounded(_upload_file(b"x" * 1024, "image/png"))

        assert len(content) == 1024

    @pytest.mark.parametrize("content_type", [None, "", "text/plain", "application/pdf"])
    def test_rejects_non_image_types(self, content_type):
        with pytest.raises(UploadError):
            self.service.validate_content_type(content_type)

    @pytest.mark.asyncio
    async def test_relay_passes_destination_to_host(self, sample_image_bytes):
        await self.service.relay(
            _upload_file(sample_image_bytes, "image/jpeg"),
            plant_code="P-17",
            community_name="Mekar",
            community_member_id="00000001",
            upload_folder="APP_PLANT_PHOTO",
        )

        self.host.upload_image.assert_awaited_once_with(
            sample_image_bytes,
            folder="Mekar/00000001/APP_PLANT_PHOTO",
            public_id="P-17_1700000000000",
        )

    @pytest.mark.asyncio
    async def test_missing_file(self):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.relay(None, "P-17", "Mekar", "00000001", "APP_PLANT_PHOTO")

        assert exc_info.value.message == "No image file provided."
        self.host.upload_image.assert_not_awaited()


class TestUploadEndpoint:

    @pytest.mark.asyncio
    async def test_valid_upload(self, client, media_host, sample_image_bytes):
        response = await client.post(
            "/api/upload-image",
            files={"image": ("leaf.jpg", sample_image_bytes, "image/jpeg")},
            data=FORM,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["imageUrl"].startswith("https://")
        assert body["publicId"]
        assert body["message"] == "Image uploaded successfully."

        media_host.upload_image.assert_awaited_once()
        kwargs = media_host.upload_image.await_args.kwargs
        assert kwargs["folder"] == "Mekar/00000001/APP_PLANT_PHOTO"
        assert kwargs["public_id"].startswith("P-17_")

    @pytest.mark.asyncio
    async def test_non_image_is_rejected_before_upload(self, client, media_host):
        response = await client.post(
            "/api/upload-image",
            files={"image": ("notes.txt", b"just text", "text/plain")},
            data=FORM,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "upload_error", "message": "Only image files are allowed!"}
        media_host.upload_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_file(self, client, media_host):
        response = await client.post("/api/upload-image", data=FORM)

        assert response.status_code == 400
        assert response.json()["message"] == "No image file provided."
        media_host.upload_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_oversized_file(self, client_factory, media_host):
        _, client = await client_factory(upload_max_file_size=2048)

        response = await client.post(
            "/api/upload-image",
            files={"image": ("big.jpg", b"\xff" * 4096, "image/jpeg")},
            data=FORM,
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("File too large.")
        media_host.upload_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_identifiers(self, client, media_host, sample_image_bytes):
        response = await client.post(
            "/api/upload-image",
            files={"image": ("leaf.jpg", sample_image_bytes, "image/jpeg")},
            data={"plantCode": "P-17", "communityName": "Mekar"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Missing required parameters: plantCode, communityName, "
            "communityMemberId, uploadFolder."
        )
        media_host.upload_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_media_host_failure(self, client, media_host, sample_image_bytes):
        media_host.upload_image.side_effect = MediaHostError(message="Image upload timed out. Please try again.")

        response = await client.post(
            "/api/upload-image",
            files={"image": ("leaf.jpg", sample_image_bytes, "image/jpeg")},
            data=FORM,
        )

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "details" not in response.json()
