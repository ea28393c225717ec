"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, Field
from typing import Optional
from triplog.app.models.enums import UserRole


class UserAccount(BaseModel):
    """A user as known to the persistence backend."""
    id: str
    name: str
    email: Optional[str] = None
    role: UserRole = UserRole.DRIVER
    is_active: bool = True

    class Config:
        from_attributes = True


class UserRegister(BaseModel):
    """
    Schema for user registration.

    Used by POST /auth/register endpoint. Only drivers register themselves;
    administrators are seeded.
    """
    id: str = Field(..., min_length=3, max_length=64, description="Unique login ID")
    name: str = Field(..., min_length=1, max_length=120, description="Full name")
    email: Optional[str] = Field(default=None, max_length=255, description="User email address")
    password: str = Field(..., min_length=3, description="Password")
    role: Optional[UserRole] = Field(default=UserRole.DRIVER, description="User role (defaults to driver)")


class UserLogin(BaseModel):
    """
    Schema for user login.

    Used by POST /auth/login endpoint.
    """
    id: str = Field(..., description="Login ID")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.

    Returned by successful login/register operations.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    role: UserRole = Field(..., description="User role")


class UserResponse(BaseModel):
    """
    Schema for user information response.

    Used by GET /auth/me endpoint.
    """
    id: str
    name: str
    role: UserRole
