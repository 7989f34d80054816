"""User Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from parcelhub.models.enums import Role


class UserBase(BaseModel):
    """Base user schema."""

    rut: str = Field(min_length=3, max_length=12)
    name: str
    email: EmailStr


class UserCreate(UserBase):
    """Schema for registering a new user."""

    password: str = Field(min_length=6)
    role: Role = Role.PARCEL_OWNER


class UserResponse(UserBase):
    """Schema for user response."""

    id: int
    role: Role
    created_at: datetime
    is_active: bool

    model_config = {"from_attributes": True}


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str


class LoginRequest(BaseModel):
    """Schema for login request."""

    rut: str
    password: str
