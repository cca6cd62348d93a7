"""
Plant API — Upload Relay Service
=================================

What:  Validates one uploaded image and relays it to the media host.
How:   Checks are ordered so nothing leaves the server unless every check
       passes. Starlette has already spooled the multipart part to a
       temporary file by the time the handler runs; the size check uses the
       size it recorded, and the in-memory read is capped at max size + 1
       byte either way.
Who:   Called by POST /api/upload-image.

Pipeline:
    1. File present?                     → ValidationError (400)
    2. Content type image/*?             → UploadError (400)
    3. Size within limit?                → UploadError (400)
    4. plantCode, communityName,
       communityMemberId, uploadFolder?  → ValidationError (400)
    5. Build destination:
         folder    = "{communityName}/{communityMemberId}/{uploadFolder}"
         public_id = "{plantCode}_{epoch milliseconds}"
    6. MediaHost.upload_image()          → MediaHostError (500) on failure
"""

import logging
import time
from typing import Callable, Optional, Tuple

from fastapi import UploadFile

from plant_api.exceptions import UploadError, ValidationError
from plant_api.schemas.upload import UploadResponse
from plant_api.services.media_base import MediaHost

logger = logging.getLogger(__name__)

REQUIRED_PARAMETERS = ("plantCode", "communityName", "communityMemberId", "uploadFolder")


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class UploadService:

    def __init__(
        self,
        media_host: MediaHost,
        max_file_size: int = 10_485_760,
        clock: Callable[[], int] = _epoch_millis,
    ):
        self.media_host = media_host
        self.max_file_size = max_file_size
        self._clock = clock

    @property
    def max_size_label(self) -> str:
        return f"{self.max_file_size / (1024 * 1024):.0f}MB"

    def validate_content_type(self, content_type: Optional[str]) -> None:
        if not content_type or not content_type.lower().startswith("image/"):
            raise UploadError(
                message="Only image files are allowed!",
                context={"content_type": content_type},
            )

    def _too_large(self, size: int) -> UploadError:
        return UploadError(
            message=f"File too large. Maximum size is {self.max_size_label}.",
            context={"max_size": self.max_file_size, "size": size},
        )

    async def read_bounded(self, file: UploadFile) -> bytes:
        """Load the upload into memory, refusing anything over the size limit."""
        if file.size is not None and file.size > self.max_file_size:
            raise self._too_large(file.size)

        content = await file.read(self.max_file_size + 1)
        if len(content) > self.max_file_size:
            raise self._too_large(len(content))
        return content

    @staticmethod
    def validate_parameters(
        plant_code: Optional[str],
        community_name: Optional[str],
        community_member_id: Optional[str],
        upload_folder: Optional[str],
    ) -> None:
        if not (plant_code and community_name and community_member_id and upload_folder):
            raise ValidationError(
                message=(
                    "Missing required parameters: "
                    + ", ".join(REQUIRED_PARAMETERS)
                    + "."
                ),
            )

    def build_destination(
        self,
        plant_code: str,
        community_name: str,
        community_member_id: str,
        upload_folder: str,
    ) -> Tuple[str, str]:
        """
        Example:
            ("Mekar/00000001/APP_PLANT_PHOTO", "P-17_1700000000000")
        """
        folder = f"{community_name}/{community_member_id}/{upload_folder}"
        public_id = f"{plant_code}_{self._clock()}"
        return folder, public_id

    async def relay(
        self,
        file: Optional[UploadFile],
        plant_code: Optional[str],
        community_name: Optional[str],
        community_member_id: Optional[str],
        upload_folder: Optional[str],
    ) -> UploadResponse:
        if file is None:
            raise ValidationError(message="No image file provided.", field="image")

        self.validate_content_type(file.content_type)
        content = await self.read_bounded(file)

        logger.info(
            "Received upload request for plantCode=%s, communityName=%s, "
            "memberId=%s, uploadFolder=%s (%d bytes)",
            plant_code,
            community_name,
            community_member_id,
            upload_folder,
            len(content),
        )

        self.validate_parameters(plant_code, community_name, community_member_id, upload_folder)
        folder, public_id = self.build_destination(
            plant_code, community_name, community_member_id, upload_folder
        )

        result = await self.media_host.upload_image(content, folder=folder, public_id=public_id)
        return UploadResponse(image_url=result.url, public_id=result.public_id)
