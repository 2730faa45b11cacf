"""
Folio Backend — Auth & User Schemas
=====================================

What:  Request bodies for register/login/password change and the user
       representation returned by /api/auth endpoints.

Security:
    UserResponse has no password field at all, so a hash can never be
    serialized by accident.
"""

import uuid
from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import Field, field_validator

from app.models.user import Role
from app.schemas.common import EmailAddress, Envelope, RequestModel, ResponseModel

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(RequestModel):
    raw_fields: ClassVar[FrozenSet[str]] = frozenset({"password"})

    username: str = Field(min_length=3, max_length=50)
    email: EmailAddress
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    role: Role = Role.EDITOR


class LoginRequest(RequestModel):
    raw_fields: ClassVar[FrozenSet[str]] = frozenset({"password"})

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        # No format check: a malformed email is just an unknown account
        return v.lower()


class PasswordChangeRequest(RequestModel):
    raw_fields: ClassVar[FrozenSet[str]] = frozenset({"currentPassword", "newPassword"})

    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)


class UserResponse(ResponseModel):
    id: uuid.UUID
    username: str
    email: str
    role: str
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserEnvelope(Envelope):
    data: UserResponse


class TokenEnvelope(Envelope):
    """Login/register/password responses: the token plus the user it belongs to."""
    token: str
    data: UserResponse
