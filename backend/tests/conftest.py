"""
Tourlist Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every API test gets a fresh app built by create_app() on an in-memory
       SQLite database, with the media service replaced by FakeMediaService.

Fixture Hierarchy (all function-scoped):
    test_settings
    └── app                     create_app(test_settings) + tables created
        ├── client              httpx AsyncClient over ASGITransport
        ├── db                  AsyncSession on the app's database (seeding)
        ├── media               the FakeMediaService installed on the app
        ├── admin_user / regular_user / other_user
        └── admin_headers / user_headers / other_headers   Bearer tokens
"""

import os

# Set before any app import: app.config builds its default Settings at import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SESSION_SECRET"] = "test-session-secret-0123456789abcdef"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from typing import Dict, List, Optional, Set
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.auth import Role, SessionResolver
from app.config import Settings
from app.exceptions import UpstreamError
from app.main import create_app
from app.models import AttractionCategory, User
from app.schemas.upload import ImageDescriptor
from app.services.media_base import MediaService

TEST_SECRET = os.environ["SESSION_SECRET"]


# ══════════════════════════════════════════════════════════════════════════
# Fakes
# ══════════════════════════════════════════════════════════════════════════

class FakeMediaService(MediaService):
    """
    In-memory media host.

    Filenames listed in `fail_for` raise UpstreamError; everything else
    "uploads" and is recorded so tests can check cleanup.
    """

    def __init__(self):
        self.uploaded: List[ImageDescriptor] = []
        self.deleted: List[str] = []
        self.fail_for: Set[str] = set()
        self.healthy = True

    async def upload_image(
        self,
        content: bytes,
        content_type: str,
        filename: Optional[str] = None,
    ) -> ImageDescriptor:
        if filename in self.fail_for:
            raise UpstreamError(context={"filename": filename})
        stem = (filename or "image").rsplit(".", 1)[0]
        descriptor = ImageDescriptor(
            url=f"https://media.test/travel-app/{stem}.jpg",
            public_id=f"travel-app/{stem}",
            width=800,
            height=600,
        )
        self.uploaded.append(descriptor)
        return descriptor

    async def delete_image(self, public_id: str) -> bool:
        self.deleted.append(public_id)
        return True

    async def health_check(self) -> bool:
        return self.healthy


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        session_secret=TEST_SECRET,
        retry_max_attempts=1,
        log_level="WARNING",
    )


@pytest.fixture
def resolver(test_settings) -> SessionResolver:
    return SessionResolver(test_settings)


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for service tests that never reach a database.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        with pytest.raises(StorageError): ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Smallest valid JPEG: SOI + JFIF header + EOI."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xd9"
    )


# ══════════════════════════════════════════════════════════════════════════
# Application fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    await application.state.database.create_all()
    application.state.media_service = FakeMediaService()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    Usage:
        response = await client.get("/attractions")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def media(app) -> FakeMediaService:
    return app.state.media_service


@pytest_asyncio.fixture
async def db(app):
    async with app.state.database.session_factory() as session:
        yield session


async def _create_user(db, email: str, role: str, name: Optional[str] = None) -> User:
    user = User(email=email, role=role, name=name)
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def admin_user(db) -> User:
    return await _create_user(db, "admin@tourlist.test", "admin", "Ama Admin")


@pytest_asyncio.fixture
async def regular_user(db) -> User:
    return await _create_user(db, "kofi@tourlist.test", "user", "Kofi")


@pytest_asyncio.fixture
async def other_user(db) -> User:
    return await _create_user(db, "esi@tourlist.test", "user", "Esi")


def bearer(resolver: SessionResolver, user_id: uuid.UUID, role: Role) -> Dict[str, str]:
    return {"Authorization": f"Bearer {resolver.issue(user_id, role=role)}"}


@pytest.fixture
def admin_headers(app, admin_user) -> Dict[str, str]:
    return bearer(app.state.session_resolver, admin_user.id, Role.ADMIN)


@pytest.fixture
def user_headers(app, regular_user) -> Dict[str, str]:
    return bearer(app.state.session_resolver, regular_user.id, Role.USER)


@pytest.fixture
def other_headers(app, other_user) -> Dict[str, str]:
    return bearer(app.state.session_resolver, other_user.id, Role.USER)


@pytest_asyncio.fixture
async def category(db) -> AttractionCategory:
    item = AttractionCategory(name="Natural", description="Parks", color="#228B22")
    db.add(item)
    await db.commit()
    return item
