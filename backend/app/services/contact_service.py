"""
Folio Backend — Contact Service
=================================

What:  Stores contact form submissions and manages their follow-up status.
Who:   Called by /api/contact routes.

Submission Flow (POST /api/contact):
    ┌──────────┐    ┌──────────┐    ┌──────────────────┐    ┌───────────────┐
    │ Validate │───▶│  Store   │───▶│  Admin notice    │───▶│ Confirmation  │
    │ (schema) │    │ + commit │    │  (admin_email)   │    │ (submitter)   │
    └──────────┘    └──────────┘    └──────────────────┘    └───────────────┘

    The contact is committed before any email goes out. If either email
    fails the request answers 500, but the lead stays in the database: an
    un-notified lead can still be followed up, a lost one cannot.
    Each notification is attempted once; there is no retry.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, InternalError, NotFoundError
from app.models.contact import Contact, ContactStatus
from app.models.user import utcnow
from app.schemas.contact import ContactCreate
from app.services.mail_base import MailService

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, mailer: MailService, admin_email: str):
        self.mailer = mailer
        self.admin_email = admin_email

    async def submit(self, db: AsyncSession, payload: ContactCreate) -> Contact:
        """
        Persist a new contact with status 'new', then send both notifications.

        Raises:
            DatabaseError: the contact could not be stored (nothing is sent)
            InternalError: a notification could not be sent (contact is kept)
        """
        contact = Contact(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            company=payload.company,
            message=payload.message,
            status=ContactStatus.NEW.value,
        )
        db.add(contact)
        # Durable before notifying; a later rollback must not drop the lead
        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to store contact: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})
        logger.info("Contact submitted: %s", contact.id)

        try:
            await self._notify_admin(contact)
            await self._confirm_to_submitter(contact)
        except Exception as e:
            logger.error(
                "Notification failed for contact %s: %s",
                contact.id,
                str(e),
                exc_info=True,
            )
            raise InternalError(
                message="Your message was received, but we could not send the notification email",
                context={"contact_id": str(contact.id), "error_type": type(e).__name__},
            )

        return contact

    async def _notify_admin(self, contact: Contact) -> None:
        subject = f"New contact form submission from {contact.first_name} {contact.last_name}"
        body = (
            "New contact form submission received:\n\n"
            f"Name: {contact.first_name} {contact.last_name}\n"
            f"Email: {contact.email}\n"
            f"Company: {contact.company or 'Not provided'}\n"
            f"Message:\n{contact.message}\n\n"
            f"Submitted: {contact.date_submitted:%Y-%m-%d %H:%M} UTC\n"
            f"Reference: {contact.id}\n"
        )
        await self.mailer.send(self.admin_email, subject, body, reply_to=contact.email)

    async def _confirm_to_submitter(self, contact: Contact) -> None:
        subject = "Thanks for getting in touch"
        body = (
            f"Hi {contact.first_name},\n\n"
            "Thank you for reaching out. We have received your message and "
            "will get back to you shortly.\n\n"
            "Your message:\n"
            f"{contact.message}\n"
        )
        await self.mailer.send(contact.email, subject, body)

    async def list_contacts(
        self, db: AsyncSession, status: Optional[ContactStatus] = None
    ) -> List[Contact]:
        query = select(Contact).order_by(desc(Contact.date_submitted))
        if status is not None:
            query = query.where(Contact.status == status.value)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, contact_id: str) -> Contact:
        try:
            parsed = uuid.UUID(str(contact_id))
        except ValueError:
            parsed = None
        contact = await db.get(Contact, parsed) if parsed is not None else None
        if contact is None:
            raise NotFoundError(resource="contact", resource_id=contact_id)
        return contact

    async def update_status(
        self, db: AsyncSession, contact_id: str, status: ContactStatus
    ) -> Contact:
        """Any status may follow any other; last_updated always moves."""
        contact = await self.get(db, contact_id)
        previous = contact.status
        contact.status = status.value
        contact.last_updated = utcnow()
        await db.flush()
        logger.info("Contact %s status %s -> %s", contact.id, previous, contact.status)
        return contact

    async def delete(self, db: AsyncSession, contact_id: str) -> None:
        contact = await self.get(db, contact_id)
        await db.delete(contact)
        await db.flush()
        logger.info("Contact deleted: %s", contact_id)
