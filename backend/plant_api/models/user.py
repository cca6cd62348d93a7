"""
Plant API — User SQLAlchemy Model
==================================

What:  ORM model for the `users` table (the credential store).
Who:   Written by registration, read by login.

Table Design:
    - id: integer primary key
    - username: unique, case-sensitive ("Fern" and "fern" are two users)
    - password: opaque bcrypt digest (salt and cost are embedded in it);
      exposed on the model as `password_hash` so it is never mistaken for
      plaintext

Lifecycle:
    Created on registration; never updated or deleted by this service.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from plant_api.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login name, unique and case-sensitive",
    )

    password_hash: Mapped[str] = mapped_column(
        "password",
        String(255),
        nullable=False,
        comment="bcrypt digest of the user's password",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
