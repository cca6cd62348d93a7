"""
Plant API — Plant SQLAlchemy Model
===================================

What:  ORM model for the `plant` table.
Who:   Used by PlantService for CRUD operations and by Alembic.

Table Design:
    - category_id: optional reference to category.id (no cascade)
    - name: the only required column
    - last_media_changed: when the plant's photo last changed (UTC)
    - code: caller-defined plant code, also used to name uploaded photos
    - location / pot_description / watering_frequency / notes: free text
    - photo_path: public URL returned by the upload relay

Query Patterns:
    - List: ORDER BY name ASC, LEFT JOIN category for category_name
    - Get:  WHERE id = :id, same join
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from plant_api.database import Base


class Plant(Base):
    __tablename__ = "plant"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("category.id"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    last_media_changed: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the plant's photo last changed (UTC)",
    )

    code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    pot_description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    watering_frequency: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    __table_args__ = (
        Index("idx_plant_name", "name"),
        Index("idx_plant_category_id", "category_id"),
    )

    def __repr__(self) -> str:
        return f"<Plant(id={self.id}, name='{self.name}', category_id={self.category_id})>"
