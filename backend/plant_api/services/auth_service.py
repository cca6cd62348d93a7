"""
Plant API — Auth Service (Registration & Login)
================================================

What:  Registers users and exchanges credentials for bearer tokens.
How:   Composes the credential store (users table), PasswordHasher and
       TokenService. Hashing runs in the threadpool.
Who:   Called by the /auth route handlers.

Register:
    username + password present? ──no──▶ ValidationError (400)
    hash password → INSERT users
    unique violation ──▶ ConflictError (409 "Username already exists")
    else ──▶ UserPublic {id, username}

Login:
    username + password present? ──no──▶ ValidationError (400)
    SELECT user by username
    absent ──▶ InvalidCredentialsError (400)
    password mismatch ──▶ InvalidCredentialsError (400, same body)
    else ──▶ signed token
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from plant_api.database import classify_integrity_error
from plant_api.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    ValidationError,
)
from plant_api.models.user import User
from plant_api.schemas.auth import UserPublic
from plant_api.services.password_hasher import PasswordHasher
from plant_api.services.token_service import TokenService

logger = logging.getLogger(__name__)


def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
    if not username or not password:
        raise ValidationError(message="Username and password are required")


class AuthService:
    """
    Registration and login workflows.

    Holds no per-request state; the database session is passed into each
    call by the route handler.
    """

    def __init__(self, hasher: PasswordHasher, tokens: TokenService):
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> UserPublic:
        _require_credentials(username, password)

        password_hash = await run_in_threadpool(self.hasher.hash, password)

        user = User(username=username, password_hash=password_hash)
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            if classify_integrity_error(e) == "unique":
                logger.info("Registration refused: username already taken")
                raise ConflictError(message="Username already exists") from e
            logger.error("Integrity error registering user: %s", str(e.orig))
            raise DatabaseError(context={"operation": "register"}) from e
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "register"}) from e

        logger.info("User registered: id=%s", user.id)
        return UserPublic(id=user.id, username=user.username)

    async def login(
        self,
        db: AsyncSession,
        username: Optional[str],
        password: Optional[str],
    ) -> str:
        """
        Verify credentials and issue a bearer token.

        An unknown username still costs one (dummy) hash verification so
        the two failure paths take comparable time.
        """
        _require_credentials(username, password)

        try:
            result = await db.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "login"}) from e

        if user is None:
            await run_in_threadpool(self.hasher.dummy_verify)
            raise InvalidCredentialsError(context={"reason": "unknown_user"})

        matches = await run_in_threadpool(self.hasher.verify, password, user.password_hash)
        if not matches:
            raise InvalidCredentialsError(context={"reason": "password_mismatch", "user_id": user.id})

        logger.info("User logged in: id=%s", user.id)
        return self.tokens.issue({"id": user.id, "username": user.username})
