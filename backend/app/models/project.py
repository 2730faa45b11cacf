"""
Folio Backend — Project SQLAlchemy Model
==========================================

What:  ORM model for the `projects` table (portfolio case studies).
Who:   Used by ProjectService for CRUD operations and by Alembic.

Table Design Rationale:
    - slug: unique, derived from title; assigned by the `title` validator so
      every write path (create, update, admin scripts) keeps it in sync
    - categories / technologies / features / gallery_images: JSON lists.
      The portfolio is small and always read whole, so a join table per list
      would only add queries.
    - testimonial: JSON object {quote, author, position, company}
    - created_by: owner reference; the owner or any admin may modify
"""

import enum
import re
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.database import Base
from app.models.user import utcnow


class Category(str, enum.Enum):
    AI = "AI"
    MOBILE = "Mobile"
    WEB = "Web"
    UI_UX = "UI/UX"


_NON_WORD = re.compile(r"[^\w ]+", re.ASCII)
_SPACES = re.compile(r" +", re.ASCII)


def slugify(title: str) -> str:
    """
    Derive the URL slug for a project title.

    Lowercase, drop everything that is not an ASCII word character or a space,
    then turn each run of spaces into one hyphen.

        >>> slugify("AI & Ops: v2!")
        'ai-ops-v2'
    """
    stripped = _NON_WORD.sub("", title.lower()).strip()
    return _SPACES.sub("-", stripped)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, index=True)
    client: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[str] = mapped_column(String(200), nullable=False)

    categories: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    technologies: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    thumbnail_image: Mapped[str] = mapped_column(String(500), nullable=False)
    gallery_images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    project_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    testimonial: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completion_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        Index("idx_projects_created_at", created_at.desc()),
    )

    @validates("title")
    def _derive_slug(self, key: str, value: str) -> str:
        self.slug = slugify(value)
        return value

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, slug='{self.slug}')>"
