"""
Plant API — Dependency Providers
=================================

What:  FastAPI `Depends` providers for everything `create_app()` builds.
How:   Each provider reads one object from `request.app.state`. Tests swap
       behaviour by passing their own Settings (or overriding a provider)
       instead of patching module globals.
"""

from fastapi import Request

from plant_api.services.auth_service import AuthService
from plant_api.services.category_service import CategoryService
from plant_api.services.plant_service import PlantService
from plant_api.services.token_service import TokenService
from plant_api.services.upload_service import UploadService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service


def get_plant_service(request: Request) -> PlantService:
    return request.app.state.plant_service


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service
