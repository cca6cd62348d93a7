"""
Plant API — Category Route Handlers
====================================

What:  CRUD endpoints for plant categories.
Who:   Public by default; behind the bearer gate when
       REQUIRE_AUTH_FOR_RESOURCES is set (see create_app).
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from plant_api.database import get_db_session
from plant_api.dependencies import get_category_service
from plant_api.schemas.category import (
    CategoryDeleteResponse,
    CategoryResponse,
    CategoryWrite,
)
from plant_api.schemas.common import ErrorResponse
from plant_api.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

_not_found = {404: {"description": "Category not found", "model": ErrorResponse}}


@router.get("", response_model=List[CategoryResponse], summary="List categories by name")
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
    categories: CategoryService = Depends(get_category_service),
) -> List[CategoryResponse]:
    return await categories.list_categories(db)


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses=_not_found,
    summary="Get one category",
)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db_session),
    categories: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await categories.get_category(db, category_id)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Name missing", "model": ErrorResponse},
        409: {"description": "Name already used", "model": ErrorResponse},
    },
    summary="Create a category",
)
async def create_category(
    body: CategoryWrite,
    db: AsyncSession = Depends(get_db_session),
    categories: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await categories.create_category(db, body)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={
        **_not_found,
        400: {"description": "Name missing", "model": ErrorResponse},
        409: {"description": "Name already used", "model": ErrorResponse},
    },
    summary="Replace a category",
)
async def update_category(
    category_id: int,
    body: CategoryWrite,
    db: AsyncSession = Depends(get_db_session),
    categories: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    return await categories.update_category(db, category_id, body)


@router.delete(
    "/{category_id}",
    response_model=CategoryDeleteResponse,
    responses={
        **_not_found,
        409: {"description": "Category still used by plants", "model": ErrorResponse},
    },
    summary="Delete a category",
)
async def delete_category(
    category_id: int,
    db: AsyncSession = Depends(get_db_session),
    categories: CategoryService = Depends(get_category_service),
) -> CategoryDeleteResponse:
    deleted = await categories.delete_category(db, category_id)
    return CategoryDeleteResponse(deleted_category=deleted)
