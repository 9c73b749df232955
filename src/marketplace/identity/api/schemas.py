"""Pydantic request/response schemas for the auth and user APIs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from marketplace.api.schemas import Envelope
from marketplace.identity.passwords import MIN_PASSWORD_LENGTH

# --- Request Schemas ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane.doe@example.com",
                    "password": "secret123",
                    "role": "buyer",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    role: str | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    reset_token: str = Field(..., min_length=1, max_length=255)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class ProfileSchema(BaseModel):
    address: str | None = Field(None, max_length=500)
    phone: str | None = Field(None, max_length=30)


class UpdateMeRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"name": "Jane Smith", "profile": {"address": "1 Main St", "phone": "555-0100"}}]}
    }

    name: str | None = Field(None, min_length=1, max_length=100)
    profile: ProfileSchema | None = None


# --- Response Schemas ---


class UserSummary(BaseModel):
    id: str
    name: str
    email: str
    role: str


class UserResponse(UserSummary):
    is_active: bool
    profile: ProfileSchema
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> UserResponse:
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            is_active=bool(user.is_active),
            profile=ProfileSchema(
                address=user.profile.address if user.profile else None,
                phone=user.profile.phone if user.profile else None,
            ),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(Envelope):
    token: str
    user: UserSummary


class ForgotPasswordResponse(Envelope):
    reset_token: str


class UserEnvelope(Envelope):
    user: UserResponse


class UserListResponse(Envelope):
    count: int
    users: list[UserResponse]
