"""
Plant API — Upload Relay Route
===============================

What:  POST /api/upload-image, a multipart form with one image and the four
       identifiers that decide where the image is stored on the media host.

Form fields:
    image              file, image/* only, at most UPLOAD_MAX_FILE_SIZE bytes
    plantCode          becomes the file name prefix
    communityName      ┐
    communityMemberId  ├ folder path on the media host
    uploadFolder       ┘

All fields are optional at the framework level so the relay can report
each missing piece with its own message and in a fixed order.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from plant_api.dependencies import get_upload_service
from plant_api.schemas.common import ErrorResponse
from plant_api.schemas.upload import UploadResponse
from plant_api.services.upload_service import UploadService

router = APIRouter(prefix="/api", tags=["Upload"])


@router.post(
    "/upload-image",
    response_model=UploadResponse,
    responses={
        400: {"description": "Missing file, wrong type, too large or missing fields", "model": ErrorResponse},
        500: {"description": "Media host failure or timeout", "model": ErrorResponse},
    },
    summary="Upload a plant photo to the media host",
)
async def upload_image(
    image: Optional[UploadFile] = File(default=None),
    plantCode: Optional[str] = Form(default=None),
    communityName: Optional[str] = Form(default=None),
    communityMemberId: Optional[str] = Form(default=None),
    uploadFolder: Optional[str] = Form(default=None),
    uploads: UploadService = Depends(get_upload_service),
) -> UploadResponse:
    try:
        return await uploads.relay(
            image,
            plant_code=plantCode,
            community_name=communityName,
            community_member_id=communityMemberId,
            upload_folder=uploadFolder,
        )
    finally:
        if image is not None:
            await image.close()
