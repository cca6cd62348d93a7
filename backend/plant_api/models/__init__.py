"""
Plant API — ORM Models
=======================

Importing this package registers every table with `Base.metadata`
(used by Alembic and by the test suite's `create_all`).
"""

from plant_api.models.category import Category
from plant_api.models.plant import Plant
from plant_api.models.user import User

__all__ = ["Category", "Plant", "User"]
