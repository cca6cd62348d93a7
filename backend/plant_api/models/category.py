"""
Plant API — Category SQLAlchemy Model
======================================

What:  ORM model for the `category` table.
Who:   Used by CategoryService for CRUD and by PlantService for the
       `category_name` join.

A category's lifecycle is independent of the plants that reference it.
Deleting a category that plants still point at is refused by the
foreign key on `plant.category_id`.
"""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from plant_api.database import Base


class Category(Base):
    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Display name, unique across categories",
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
