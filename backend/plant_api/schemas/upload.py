"""
Plant API — Upload Relay Schemas
=================================
"""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """
    Returned by POST /api/upload-image.

    Example:
        {
            "imageUrl": "https://res.cloudinary.com/demo/image/upload/v1/Mekar/00000001/APP_PLANT_PHOTO/P-17_1700000000000.jpg",
            "publicId": "Mekar/00000001/APP_PLANT_PHOTO/P-17_1700000000000",
            "message": "Image uploaded successfully."
        }
    """
    image_url: str = Field(alias="imageUrl", description="Public HTTPS URL of the rendition")
    public_id: str = Field(alias="publicId", description="Media host id, including the folder path")
    message: str = Field(default="Image uploaded successfully.")

    model_config = {"populate_by_name": True}
