"""
Folio Backend — Contact SQLAlchemy Model
==========================================

What:  ORM model for the `contacts` table (website contact form submissions).

Lifecycle:
    1. Created by a public form submission with status 'new'
    2. Status changed by an admin/editor; last_updated follows every change
    3. All other fields are immutable after creation

Status values are unordered: any value may follow any other.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.user import utcnow


class ContactStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ContactStatus.NEW.value
    )

    date_submitted: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Inbox view: newest submissions first
    __table_args__ = (
        Index("idx_contacts_date_submitted", date_submitted.desc()),
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, email='{self.email}', status='{self.status}')>"
