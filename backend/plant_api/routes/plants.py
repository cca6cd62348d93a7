"""
Plant API — Plant Route Handlers
=================================

What:  CRUD endpoints for plants. Every response carries `category_name`
       from the category join.
Who:   Public by default; behind the bearer gate when
       REQUIRE_AUTH_FOR_RESOURCES is set (see create_app).
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from plant_api.database import get_db_session
from plant_api.dependencies import get_plant_service
from plant_api.schemas.common import ErrorResponse
from plant_api.schemas.plant import PlantDeleteResponse, PlantResponse, PlantWrite
from plant_api.services.plant_service import PlantService

router = APIRouter(prefix="/plants", tags=["Plants"])

_not_found = {404: {"description": "Plant not found", "model": ErrorResponse}}
_write_errors = {
    400: {"description": "Name missing or unknown category_id", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get("", response_model=List[PlantResponse], summary="List plants by name")
async def list_plants(
    db: AsyncSession = Depends(get_db_session),
    plants: PlantService = Depends(get_plant_service),
) -> List[PlantResponse]:
    return await plants.list_plants(db)


@router.get(
    "/{plant_id}",
    response_model=PlantResponse,
    responses=_not_found,
    summary="Get one plant",
)
async def get_plant(
    plant_id: int,
    db: AsyncSession = Depends(get_db_session),
    plants: PlantService = Depends(get_plant_service),
) -> PlantResponse:
    return await plants.get_plant(db, plant_id)


@router.post(
    "",
    response_model=PlantResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_write_errors,
    summary="Create a plant",
)
async def create_plant(
    body: PlantWrite,
    db: AsyncSession = Depends(get_db_session),
    plants: PlantService = Depends(get_plant_service),
) -> PlantResponse:
    return await plants.create_plant(db, body)


@router.put(
    "/{plant_id}",
    response_model=PlantResponse,
    responses={**_not_found, **_write_errors},
    summary="Replace a plant",
    description="Full replacement: omitted fields are stored as null.",
)
async def update_plant(
    plant_id: int,
    body: PlantWrite,
    db: AsyncSession = Depends(get_db_session),
    plants: PlantService = Depends(get_plant_service),
) -> PlantResponse:
    return await plants.update_plant(db, plant_id, body)


@router.delete(
    "/{plant_id}",
    response_model=PlantDeleteResponse,
    responses=_not_found,
    summary="Delete a plant",
)
async def delete_plant(
    plant_id: int,
    db: AsyncSession = Depends(get_db_session),
    plants: PlantService = Depends(get_plant_service),
) -> PlantDeleteResponse:
    deleted = await plants.delete_plant(db, plant_id)
    return PlantDeleteResponse(deleted_plant=deleted)
