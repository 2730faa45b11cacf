"""
Folio Backend — Project Schemas
=================================

What:  Create/update bodies for portfolio projects and the public project
       representation.
Why:   Field constraints live here so ProjectService only ever sees a typed,
       fully-populated payload.

Constraints:
    - title ≤ 100 chars, shortDescription ≤ 200 chars
    - categories: non-empty, each one of AI / Mobile / Web / UI/UX,
      duplicates collapsed (it is a set)
    - technologies: non-empty list of non-blank strings
    - slug is never accepted from clients; it is derived from title
"""

import uuid
from datetime import date, datetime
from typing import ClassVar, List, Optional, Tuple

from pydantic import Field, field_validator, model_validator

from app.models.project import Category
from app.schemas.common import CamelModel, Envelope, RequestModel, ResponseModel


def _dedupe(values: List) -> List:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _non_blank(values: List[str]) -> List[str]:
    if any(not v for v in values):
        raise ValueError("Entries must not be blank")
    return values


class Testimonial(CamelModel):
    quote: str = Field(min_length=1, max_length=1000)
    author: str = Field(min_length=1, max_length=100)
    position: Optional[str] = Field(default=None, max_length=100)
    company: Optional[str] = Field(default=None, max_length=100)


class ProjectCreate(RequestModel):
    title: str = Field(min_length=1, max_length=100)
    client: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    short_description: str = Field(min_length=1, max_length=200)
    categories: List[Category] = Field(min_length=1)
    technologies: List[str] = Field(min_length=1)
    features: List[str] = Field(default_factory=list)
    thumbnail_image: str = Field(min_length=1, max_length=500)
    gallery_images: List[str] = Field(default_factory=list)
    project_url: Optional[str] = Field(default=None, max_length=500)
    testimonial: Optional[Testimonial] = None
    featured: bool = False
    completion_date: date

    @field_validator("categories")
    @classmethod
    def unique_categories(cls, v: List[Category]) -> List[Category]:
        return _dedupe(v)

    @field_validator("technologies", "features", "gallery_images")
    @classmethod
    def no_blank_entries(cls, v: List[str]) -> List[str]:
        return _non_blank(v)


class ProjectUpdate(RequestModel):
    """
    Partial update. Only fields present in the body are applied; the same
    constraints as ProjectCreate hold for each of them.
    """

    # Fields that may not be cleared with an explicit null
    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "title", "client", "description", "short_description", "categories",
        "technologies", "features", "thumbnail_image", "gallery_images",
        "featured", "completion_date",
    )

    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    client: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    short_description: Optional[str] = Field(default=None, min_length=1, max_length=200)
    categories: Optional[List[Category]] = Field(default=None, min_length=1)
    technologies: Optional[List[str]] = Field(default=None, min_length=1)
    features: Optional[List[str]] = None
    thumbnail_image: Optional[str] = Field(default=None, min_length=1, max_length=500)
    gallery_images: Optional[List[str]] = None
    project_url: Optional[str] = Field(default=None, max_length=500)
    testimonial: Optional[Testimonial] = None
    featured: Optional[bool] = None
    completion_date: Optional[date] = None

    @field_validator("categories")
    @classmethod
    def unique_categories(cls, v: Optional[List[Category]]) -> Optional[List[Category]]:
        return _dedupe(v) if v is not None else v

    @field_validator("technologies", "features", "gallery_images")
    @classmethod
    def no_blank_entries(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _non_blank(v) if v is not None else v

    @model_validator(mode="after")
    def reject_null_required(self) -> "ProjectUpdate":
        for name in self.REQUIRED_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ProjectResponse(ResponseModel):
    id: uuid.UUID
    title: str
    slug: str
    client: str
    description: str
    short_description: str
    categories: List[str]
    technologies: List[str]
    features: List[str]
    thumbnail_image: str
    gallery_images: List[str]
    project_url: Optional[str] = None
    testimonial: Optional[Testimonial] = None
    featured: bool
    completion_date: date
    created_by: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectEnvelope(Envelope):
    data: ProjectResponse


class ProjectListEnvelope(Envelope):
    count: int
    data: List[ProjectResponse]


class UploadResult(CamelModel):
    path: str = Field(description="Stored image reference for thumbnailImage/galleryImages")


class UploadEnvelope(Envelope):
    data: UploadResult
