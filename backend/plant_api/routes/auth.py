"""
Plant API — Auth Route Handlers
================================

What:  Registration, login and "who am I" for bearer-token clients.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from plant_api.database import get_db_session
from plant_api.dependencies import get_auth_service
from plant_api.middleware.auth import require_user
from plant_api.schemas.auth import (
    CredentialsRequest,
    Identity,
    LoginResponse,
    RegisterResponse,
)
from plant_api.schemas.common import ErrorResponse
from plant_api.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Username or password missing", "model": ErrorResponse},
        409: {"description": "Username already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a user account",
)
async def register(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    user = await auth.register(db, body.username, body.password)
    return RegisterResponse(user=user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing fields or invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def login(
    body: CredentialsRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    token = await auth.login(db, body.username, body.password)
    return LoginResponse(token=token)


@router.get(
    "/me",
    response_model=Identity,
    responses={
        401: {"description": "No bearer token", "model": ErrorResponse},
        403: {"description": "Invalid or expired token", "model": ErrorResponse},
    },
    summary="Identity carried by the bearer token",
)
async def me(user: Identity = Depends(require_user)) -> Identity:
    return user
