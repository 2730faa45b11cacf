"""
Folio Backend — User SQLAlchemy Model
=======================================

What:  ORM model for the `users` table (site administrators and editors).
Who:   Used by AuthService for registration, login, and token resolution.

Table Design Rationale:
    - UUID primary key: non-sequential, safe to expose in tokens
    - email and username are unique (secondary indexes)
    - password_hash: salted pbkdf2 hash, never the plaintext password
    - last_login: touched on every successful login
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    EDITOR = "editor"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    A back-office account.

    Lifecycle:
        1. Created by registration (role defaults to editor)
        2. last_login updated on each login
        3. password_hash replaced on password change
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.EDITOR.value)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def __repr__(self) -> str:
        # Never include password_hash
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
