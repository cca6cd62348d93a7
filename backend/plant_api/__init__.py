"""
Plant API — Application Package
================================

REST backend for a plant catalogue: user accounts with bearer tokens,
plant and category CRUD over PostgreSQL, and an image upload relay to
Cloudinary.

    ┌─────────────────────────────────────┐
    │   Routes + bearer gate (API layer)  │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       Services (business logic)     │  ← validation, orchestration
    ├─────────────────────────────────────┤
    │      Models & Schemas (data)        │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database / media host (outside)   │  ← asyncpg, Cloudinary SDK
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
