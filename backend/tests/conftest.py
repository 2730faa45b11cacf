"""
Folio Backend — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own application built by create_app() around an
       isolated Settings object: a fresh SQLite file, a temporary upload
       directory, and a recording mail backend. No globals are patched.

Fixture Hierarchy (all function-scoped):
    test_settings ─┐
    mailer ────────┴─▶ context ─▶ folio_app ─▶ test_client
                          │
                          ├─▶ admin / editor / other_editor  (user, token)
                          └─▶ db_session

Note:
    httpx's ASGITransport does not run the lifespan, so the context fixture
    performs startup (tables, storage) and shutdown itself.
"""

import os
from dataclasses import dataclass
from typing import AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the default app built at import time away from real services
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_CREATE_TABLES", "false")

from app.config import Settings  # noqa: E402
from app.context import AppContext  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models.user import Role, User  # noqa: E402
from app.security import hash_password  # noqa: E402
from app.services.mail_base import MailService  # noqa: E402

TEST_PASSWORD = "correct-horse-battery"


# ══════════════════════════════════════════════════════════════════════════
# Test Doubles
# ══════════════════════════════════════════════════════════════════════════

class RecordingMailService(MailService):
    """
    Keeps every message in memory instead of sending it.

    Set `fail_on` to an address to make sends to it raise, simulating an
    unreachable SMTP relay.
    """

    def __init__(self):
        self.sent: List[Dict[str, Optional[str]]] = []
        self.fail_on: Optional[str] = None

    async def send(self, to, subject, body, reply_to=None):
        if self.fail_on is not None and to == self.fail_on:
            raise ConnectionError(f"SMTP relay refused {to}")
        self.sent.append({"to": to, "subject": subject, "body": body, "reply_to": reply_to})


@dataclass
class Account:
    user: User
    token: str

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        storage_root=str(tmp_path / "uploads"),
        jwt_secret="test-secret-not-for-production",
        log_level="WARNING",
        mail_backend="console",
        admin_email="owner@folio.test",
        rate_limit_requests=10000,
        rate_limit_window=600,
        db_create_tables=True,
        allow_public_registration=True,
    )


@pytest.fixture
def mailer() -> RecordingMailService:
    return RecordingMailService()


@pytest_asyncio.fixture
async def context(test_settings, mailer) -> AsyncGenerator[AppContext, None]:
    ctx = AppContext(test_settings, mailer=mailer)
    await ctx.startup()
    yield ctx
    await ctx.shutdown()


@pytest.fixture
def folio_app(context):
    return create_app(context=context)


@pytest_asyncio.fixture
async def test_client(folio_app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=folio_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def db_session(context):
    """A session on the test database, for arranging and inspecting rows."""
    async with context.database.session() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Accounts
# ══════════════════════════════════════════════════════════════════════════

async def create_account(context: AppContext, username: str, role: Role) -> Account:
    async with context.database.session() as session:
        user = User(
            username=username,
            email=f"{username}@folio.test",
            password_hash=hash_password(TEST_PASSWORD),
            role=role.value,
        )
        session.add(user)
        await session.commit()
    return Account(user=user, token=context.tokens.create_access_token(user.id))


@pytest_asyncio.fixture
async def admin(context) -> Account:
    return await create_account(context, "admin", Role.ADMIN)


@pytest_asyncio.fixture
async def editor(context) -> Account:
    return await create_account(context, "editor", Role.EDITOR)


@pytest_asyncio.fixture
async def other_editor(context) -> Account:
    return await create_account(context, "other", Role.EDITOR)


# ══════════════════════════════════════════════════════════════════════════
# Sample Data
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def sample_image_bytes():
    """Smallest valid JPEG: SOI + JFIF marker + EOI."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def project_payload():
    """A valid create-project body in wire (camelCase) format."""
    return {
        "title": "Vision Ops Platform",
        "client": "Acme Robotics",
        "description": "End-to-end computer vision pipeline for warehouse robots.",
        "shortDescription": "Computer vision for warehouses",
        "categories": ["AI", "Web"],
        "technologies": ["Python", "PyTorch", "FastAPI"],
        "features": ["Real-time detection", "Fleet dashboard"],
        "thumbnailImage": "/uploads/2024/01/15/thumb.png",
        "galleryImages": ["/uploads/2024/01/15/one.png"],
        "projectUrl": "https://example.com/vision",
        "testimonial": {
            "quote": "They shipped in six weeks.",
            "author": "Dana Smith",
            "position": "CTO",
            "company": "Acme Robotics",
        },
        "featured": True,
        "completionDate": "2024-03-01",
    }


@pytest.fixture
def contact_payload():
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "company": "Analytical Engines",
        "message": "We would like a quote for a new marketing site.",
    }


@pytest.fixture
def account_password():
    """Plaintext password of every account fixture."""
    return TEST_PASSWORD
