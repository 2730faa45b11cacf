"""
Folio Backend — Contact Schemas
=================================

What:  The public contact form body, the status update body, and the
       contact representation shown to admins/editors.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.contact import ContactStatus
from app.schemas.common import EmailAddress, Envelope, RequestModel, ResponseModel


class ContactCreate(RequestModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailAddress
    company: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(min_length=1, max_length=5000)

    @field_validator("company")
    @classmethod
    def blank_company_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ContactStatusUpdate(RequestModel):
    status: ContactStatus


class ContactResponse(ResponseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company: Optional[str] = None
    message: str
    status: str
    date_submitted: datetime
    last_updated: datetime

    model_config = {"from_attributes": True}


class ContactEnvelope(Envelope):
    data: ContactResponse


class ContactListEnvelope(Envelope):
    count: int
    data: List[ContactResponse]
