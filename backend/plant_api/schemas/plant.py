"""
Plant API — Plant Schemas
==========================

PlantResponse is always the *joined* row: the plant's columns plus the
name of its category (null when the plant has none).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlantWrite(BaseModel):
    """
    Body of POST /plants and PUT /plants/{id}.

    PUT is a full replacement: fields left out are stored as null.
    """
    category_id: Optional[int] = Field(default=None, description="Category reference")
    name: Optional[str] = Field(default=None, description="Plant name (required)")
    last_media_changed: Optional[datetime] = Field(default=None)
    code: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    pot_description: Optional[str] = Field(default=None)
    watering_frequency: Optional[str] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    photo_path: Optional[str] = Field(default=None)


class PlantResponse(BaseModel):
    id: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    name: str
    last_media_changed: Optional[datetime] = None
    code: Optional[str] = None
    location: Optional[str] = None
    pot_description: Optional[str] = None
    watering_frequency: Optional[str] = None
    notes: Optional[str] = None
    photo_path: Optional[str] = None

    model_config = {"from_attributes": True}


class PlantDeleteResponse(BaseModel):
    message: str = Field(default="Plant deleted successfully")
    deleted_plant: PlantResponse = Field(alias="deletedPlant")

    model_config = {"populate_by_name": True}
