"""
Folio Backend — Application Context
=====================================

What:  Holds every long-lived collaborator of one application instance.
Why:   Services receive their dependencies explicitly instead of reaching for
       module-level singletons, so each test can build an isolated app with
       its own database, storage directory, and mail backend.
How:   create_app() builds one AppContext, stores it on app.state.context,
       and the lifespan calls startup()/shutdown().

    AppContext
    ├── settings   Settings
    ├── database   Database        (engine + session factory)
    ├── files      FileService     (image uploads)
    ├── mailer     MailService     (console or SMTP)
    ├── tokens     TokenManager    (JWT issue/verify)
    ├── auth       AuthService
    ├── projects   ProjectService
    └── contacts   ContactService
"""

import logging
import time
from typing import Optional

from fastapi import Request

from app.config import Settings
from app.database import Database
from app.security import TokenManager
from app.services.auth_service import AuthService
from app.services.contact_service import ContactService
from app.services.file_service import FileService
from app.services.mail_base import MailService
from app.services.mail_service import build_mail_service
from app.services.project_service import ProjectService

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(self, settings: Settings, mailer: Optional[MailService] = None):
        self.settings = settings
        self.database = Database(settings)
        self.files = FileService(settings.storage_root, settings.max_upload_size)
        self.mailer = mailer or build_mail_service(settings)
        self.tokens = TokenManager(settings)
        self.auth = AuthService(self.tokens)
        self.projects = ProjectService()
        self.contacts = ContactService(self.mailer, settings.admin_email)
        self.started_at = time.time()

    async def startup(self) -> None:
        """Prepare storage and (optionally) the schema before serving."""
        self.files.ensure_storage()
        if self.settings.db_create_tables:
            await self.database.create_tables()
        self.started_at = time.time()

    async def shutdown(self) -> None:
        await self.database.dispose()
        logger.info("Database connections closed")


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context of the serving app."""
    return request.app.state.context
