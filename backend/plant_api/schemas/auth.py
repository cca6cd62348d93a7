"""
Plant API — Authentication Schemas
===================================

Register/login bodies and the public view of a user.

Request fields are Optional on purpose: a missing username or password is
reported by AuthService with the API's own 400 message instead of the
framework's generic field error.
"""

from typing import Optional

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Body of POST /auth/register and POST /auth/login."""
    username: Optional[str] = Field(default=None, description="Login name (case-sensitive)")
    password: Optional[str] = Field(default=None, description="Plaintext password")


class UserPublic(BaseModel):
    """What the API ever reveals about a user. Never includes the hash."""
    id: int
    username: str

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str = Field(default="User registered successfully")
    user: UserPublic


class LoginResponse(BaseModel):
    message: str = Field(default="Logged in successfully")
    token: str = Field(description="Bearer token, valid for one hour")


class Identity(BaseModel):
    """Claims recovered from a verified bearer token."""
    id: int
    username: str
