"""
Folio Backend — Contact Route Handlers
========================================

What:  Public contact form submission plus lead management for staff.

Route Inventory:
    POST   /api/contact              submit (public)
    GET    /api/contact              list, newest first (admin/editor)
    GET    /api/contact/{id}         one contact (admin/editor)
    PUT    /api/contact/{id}         change status (admin/editor)
    DELETE /api/contact/{id}         delete (admin/editor)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.context import AppContext, get_context
from app.database import get_db_session
from app.dependencies import require_roles
from app.models.contact import ContactStatus
from app.models.user import Role
from app.schemas.common import ErrorEnvelope, MessageEnvelope
from app.schemas.contact import (
    ContactCreate,
    ContactEnvelope,
    ContactListEnvelope,
    ContactResponse,
    ContactStatusUpdate,
)

router = APIRouter(prefix="/api/contact", tags=["Contact"])

staff_only = Depends(require_roles(Role.ADMIN, Role.EDITOR))

STAFF_ERRORS = {401: {"model": ErrorEnvelope}, 403: {"model": ErrorEnvelope}}


@router.post(
    "",
    status_code=201,
    response_model=ContactEnvelope,
    responses={400: {"model": ErrorEnvelope}, 500: {"model": ErrorEnvelope}},
    summary="Submit the contact form",
    description=(
        "Stores the submission, then emails the site admin and sends the "
        "submitter a confirmation. If an email cannot be sent the response "
        "is 500 but the submission is kept."
    ),
)
async def submit_contact(
    payload: ContactCreate,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ContactEnvelope:
    contact = await context.contacts.submit(db, payload)
    return ContactEnvelope(data=ContactResponse.model_validate(contact))


@router.get(
    "",
    response_model=ContactListEnvelope,
    responses=STAFF_ERRORS,
    dependencies=[staff_only],
    summary="List contact submissions",
)
async def list_contacts(
    status: Optional[ContactStatus] = Query(default=None, description="Only contacts in this status"),
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ContactListEnvelope:
    contacts = await context.contacts.list_contacts(db, status=status)
    return ContactListEnvelope(
        count=len(contacts),
        data=[ContactResponse.model_validate(c) for c in contacts],
    )


@router.get(
    "/{contact_id}",
    response_model=ContactEnvelope,
    responses={**STAFF_ERRORS, 404: {"model": ErrorEnvelope}},
    dependencies=[staff_only],
    summary="Get one contact submission",
)
async def get_contact(
    contact_id: str,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ContactEnvelope:
    contact = await context.contacts.get(db, contact_id)
    return ContactEnvelope(data=ContactResponse.model_validate(contact))


@router.put(
    "/{contact_id}",
    response_model=ContactEnvelope,
    responses={**STAFF_ERRORS, 400: {"model": ErrorEnvelope}, 404: {"model": ErrorEnvelope}},
    dependencies=[staff_only],
    summary="Update a contact's status",
)
async def update_contact_status(
    contact_id: str,
    payload: ContactStatusUpdate,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> ContactEnvelope:
    contact = await context.contacts.update_status(db, contact_id, payload.status)
    return ContactEnvelope(data=ContactResponse.model_validate(contact))


@router.delete(
    "/{contact_id}",
    response_model=MessageEnvelope,
    responses={**STAFF_ERRORS, 404: {"model": ErrorEnvelope}},
    dependencies=[staff_only],
    summary="Delete a contact submission",
)
async def delete_contact(
    contact_id: str,
    db: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> MessageEnvelope:
    await context.contacts.delete(db, contact_id)
    return MessageEnvelope()
