"""Create users, category and plant tables

Revision ID: 001
Revises: None
Create Date: 2024-03-01 00:00:00.000000+00:00

What:  Initial schema: the credential store plus the plant catalogue.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "username",
            sa.String(255),
            nullable=False,
            comment="Login name, unique and case-sensitive",
        ),
        sa.Column(
            "password",
            sa.String(255),
            nullable=False,
            comment="bcrypt digest of the user's password",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Display name, unique across categories",
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "plant",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "last_media_changed",
            sa.TIMESTAMP(timezone=True),
            nullable=True,
            comment="When the plant's photo last changed (UTC)",
        ),
        sa.Column("code", sa.String(100), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("pot_description", sa.String(255), nullable=True),
        sa.Column("watering_frequency", sa.String(100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("photo_path", sa.String(1024), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        # No ON DELETE action: a category in use cannot be deleted
        sa.ForeignKeyConstraint(["category_id"], ["category.id"]),
    )

    # List endpoint orders by name; the join probes category_id
    op.create_index("idx_plant_name", "plant", ["name"])
    op.create_index("idx_plant_category_id", "plant", ["category_id"])


def downgrade() -> None:
    op.drop_index("idx_plant_category_id", table_name="plant")
    op.drop_index("idx_plant_name", table_name="plant")
    op.drop_table("plant")
    op.drop_table("category")
    op.drop_table("users")
