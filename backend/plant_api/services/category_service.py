"""
Plant API — Category Service
=============================

What:  CRUD over the `category` table.
How:   One statement per operation; UPDATE and DELETE use RETURNING so a
       missing id is detected without a separate lookup.
Who:   Called by the /categories route handlers.

Error mapping:
    missing name                     → ValidationError (400)
    no row for id                    → NotFoundError (404)
    duplicate name                   → ConflictError (409)
    delete while plants reference it → ConflictError (409)
    anything else from the store     → DatabaseError (500)
"""

import logging
from typing import List, NoReturn

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from plant_api.database import classify_integrity_error
from plant_api.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from plant_api.models.category import Category
from plant_api.schemas.category import CategoryResponse, CategoryWrite

logger = logging.getLogger(__name__)


class CategoryService:

    async def list_categories(self, db: AsyncSession) -> List[CategoryResponse]:
        try:
            result = await db.execute(select(Category).order_by(Category.name.asc()))
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list_categories"}) from e
        return [CategoryResponse.model_validate(c) for c in result.scalars().all()]

    async def get_category(self, db: AsyncSession, category_id: int) -> CategoryResponse:
        try:
            result = await db.execute(select(Category).where(Category.id == category_id))
            category = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching category %s: %s", category_id, str(e))
            raise DatabaseError(context={"category_id": category_id}) from e

        if category is None:
            raise NotFoundError(resource="category", resource_id=category_id)
        return CategoryResponse.model_validate(category)

    async def create_category(self, db: AsyncSession, payload: CategoryWrite) -> CategoryResponse:
        if not payload.name:
            raise ValidationError(message="Category name is required", field="name")

        category = Category(name=payload.name, description=payload.description)
        db.add(category)
        try:
            await db.flush()
        except IntegrityError as e:
            self._raise_for_integrity(e, operation="create")
        except SQLAlchemyError as e:
            logger.error("Database error creating category: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_category"}) from e

        logger.info("Category created: id=%s", category.id)
        return CategoryResponse.model_validate(category)

    async def update_category(
        self,
        db: AsyncSession,
        category_id: int,
        payload: CategoryWrite,
    ) -> CategoryResponse:
        if not payload.name:
            raise ValidationError(message="Category name is required", field="name")

        stmt = (
            update(Category)
            .where(Category.id == category_id)
            .values(name=payload.name, description=payload.description)
            .returning(Category)
        )
        try:
            result = await db.execute(stmt)
            category = result.scalar_one_or_none()
        except IntegrityError as e:
            self._raise_for_integrity(e, operation="update")
        except SQLAlchemyError as e:
            logger.error("Database error updating category %s: %s", category_id, str(e))
            raise DatabaseError(context={"category_id": category_id}) from e

        if category is None:
            raise NotFoundError(resource="category", resource_id=category_id)
        return CategoryResponse.model_validate(category)

    async def delete_category(self, db: AsyncSession, category_id: int) -> CategoryResponse:
        stmt = delete(Category).where(Category.id == category_id).returning(Category)
        try:
            result = await db.execute(stmt)
            category = result.scalar_one_or_none()
        except IntegrityError as e:
            self._raise_for_integrity(e, operation="delete")
        except SQLAlchemyError as e:
            logger.error("Database error deleting category %s: %s", category_id, str(e))
            raise DatabaseError(context={"category_id": category_id}) from e

        if category is None:
            raise NotFoundError(resource="category", resource_id=category_id)
        logger.info("Category deleted: id=%s", category_id)
        return CategoryResponse.model_validate(category)

    @staticmethod
    def _raise_for_integrity(e: IntegrityError, operation: str) -> NoReturn:
        kind = classify_integrity_error(e)
        if kind == "unique":
            raise ConflictError(message="Category name already exists") from e
        if kind == "foreign_key" and operation == "delete":
            raise ConflictError(message="Category is still used by one or more plants") from e
        logger.error("Integrity error on category %s: %s", operation, str(e.orig))
        raise DatabaseError(context={"operation": f"{operation}_category"}) from e
