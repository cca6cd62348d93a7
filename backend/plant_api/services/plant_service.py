"""
Plant API — Plant Service
==========================

What:  CRUD over the `plant` table, always answering with the joined row
       (plant columns + `category_name`).
How:   Writes are single INSERT / UPDATE / DELETE statements. After INSERT and
       UPDATE the joined row is read back with a LEFT JOIN on category inside
       the same transaction; DELETE echoes the row from its RETURNING clause.
Who:   Called by the /plants route handlers.

Joined read:
    SELECT p.*, c.name AS category_name
    FROM plant p LEFT JOIN category c ON p.category_id = c.id
    [WHERE p.id = :id | ORDER BY p.name ASC]

Error mapping:
    missing name                    → ValidationError (400)
    category_id with no category    → ValidationError (400)
    no row for id                   → NotFoundError (404)
    anything else from the store    → DatabaseError (500)
"""

import logging
from typing import Any, Dict, List, NoReturn, Optional

from sqlalchemy import Select, delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from plant_api.database import classify_integrity_error
from plant_api.exceptions import (
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from plant_api.models.category import Category
from plant_api.models.plant import Plant
from plant_api.schemas.plant import PlantResponse, PlantWrite

logger = logging.getLogger(__name__)

# Columns a client may write; `id` is assigned by the store
WRITABLE_COLUMNS = (
    "category_id",
    "name",
    "last_media_changed",
    "code",
    "location",
    "pot_description",
    "watering_frequency",
    "notes",
    "photo_path",
)


def _joined_select() -> Select:
    return (
        select(Plant, Category.name.label("category_name"))
        .outerjoin(Category, Plant.category_id == Category.id)
        .execution_options(populate_existing=True)
    )


def _to_response(plant: Plant, category_name: Optional[str]) -> PlantResponse:
    data: Dict[str, Any] = {column: getattr(plant, column) for column in WRITABLE_COLUMNS}
    return PlantResponse(id=plant.id, category_name=category_name, **data)


def _values(payload: PlantWrite) -> Dict[str, Any]:
    return payload.model_dump(include=set(WRITABLE_COLUMNS))


class PlantService:

    async def list_plants(self, db: AsyncSession) -> List[PlantResponse]:
        try:
            result = await db.execute(_joined_select().order_by(Plant.name.asc()))
        except SQLAlchemyError as e:
            logger.error("Database error listing plants: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list_plants"}) from e
        return [_to_response(row.Plant, row.category_name) for row in result.all()]

    async def get_plant(self, db: AsyncSession, plant_id: int) -> PlantResponse:
        plant = await self._fetch_joined(db, plant_id)
        if plant is None:
            raise NotFoundError(resource="plant", resource_id=plant_id)
        return plant

    async def create_plant(self, db: AsyncSession, payload: PlantWrite) -> PlantResponse:
        if not payload.name:
            raise ValidationError(message="Plant name is required", field="name")

        plant = Plant(**_values(payload))
        db.add(plant)
        try:
            await db.flush()
        except IntegrityError as e:
            self._raise_for_integrity(e, operation="create")
        except SQLAlchemyError as e:
            logger.error("Database error creating plant: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_plant"}) from e

        logger.info("Plant created: id=%s", plant.id)
        created = await self._fetch_joined(db, plant.id)
        if created is None:
            raise DatabaseError(context={"operation": "create_plant", "plant_id": plant.id})
        return created

    async def update_plant(
        self,
        db: AsyncSession,
        plant_id: int,
        payload: PlantWrite,
    ) -> PlantResponse:
        """Full replacement of a plant's writable columns."""
        if not payload.name:
            raise ValidationError(message="Plant name is required", field="name")

        stmt = (
            update(Plant)
            .where(Plant.id == plant_id)
            .values(**_values(payload))
            .returning(Plant.id)
        )
        try:
            result = await db.execute(stmt)
            updated_id = result.scalar_one_or_none()
        except IntegrityError as e:
            self._raise_for_integrity(e, operation="update")
        except SQLAlchemyError as e:
            logger.error("Database error updating plant %s: %s", plant_id, str(e))
            raise DatabaseError(context={"plant_id": plant_id}) from e

        if updated_id is None:
            raise NotFoundError(resource="plant", resource_id=plant_id)

        updated = await self._fetch_joined(db, updated_id)
        if updated is None:
            raise NotFoundError(resource="plant", resource_id=plant_id)
        return updated

    async def delete_plant(self, db: AsyncSession, plant_id: int) -> PlantResponse:
        """
        Delete a plant and return the row it removed.

        The DELETE itself reports the removed row, so a plant deleted by a
        concurrent request is a 404 here, never a second success.
        """
        stmt = delete(Plant).where(Plant.id == plant_id).returning(Plant)
        try:
            result = await db.execute(stmt)
            plant = result.scalar_one_or_none()
            if plant is None:
                raise NotFoundError(resource="plant", resource_id=plant_id)
            category_name = await self._category_name(db, plant.category_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting plant %s: %s", plant_id, str(e))
            raise DatabaseError(context={"plant_id": plant_id}) from e

        logger.info("Plant deleted: id=%s", plant_id)
        return _to_response(plant, category_name)

    async def _category_name(self, db: AsyncSession, category_id: Optional[int]) -> Optional[str]:
        if category_id is None:
            return None
        result = await db.execute(select(Category.name).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def _fetch_joined(self, db: AsyncSession, plant_id: int) -> Optional[PlantResponse]:
        try:
            result = await db.execute(_joined_select().where(Plant.id == plant_id))
            row = result.one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching plant %s: %s", plant_id, str(e))
            raise DatabaseError(context={"plant_id": plant_id}) from e

        if row is None:
            return None
        return _to_response(row.Plant, row.category_name)

    @staticmethod
    def _raise_for_integrity(e: IntegrityError, operation: str) -> NoReturn:
        kind = classify_integrity_error(e)
        if kind == "foreign_key":
            raise ValidationError(
                message="category_id does not reference an existing category",
                field="category_id",
            ) from e
        logger.error("Integrity error on plant %s: %s", operation, str(e.orig))
        raise DatabaseError(context={"operation": f"{operation}_plant"}) from e
