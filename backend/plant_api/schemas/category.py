"""
Plant API — Category Schemas
=============================
"""

from typing import Optional

from pydantic import BaseModel, Field


class CategoryWrite(BaseModel):
    """Body of POST /categories and PUT /categories/{id}."""
    name: Optional[str] = Field(default=None, description="Unique category name (required)")
    description: Optional[str] = Field(default=None)


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class CategoryDeleteResponse(BaseModel):
    message: str = Field(default="Category deleted successfully")
    deleted_category: CategoryResponse = Field(alias="deletedCategory")

    model_config = {"populate_by_name": True}
