"""
Request and response models for the Auth service.
"""

from pydantic import BaseModel, Field


class AuthRequest(BaseModel):
    """Body of register and login requests."""
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterResponse(BaseModel):
    id: str
    username: str


class LoginResponse(BaseModel):
    token: str
