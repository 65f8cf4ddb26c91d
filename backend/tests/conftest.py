"""
Contacts API — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Reusable test infrastructure: a throwaway SQLite database, the real
       accessor on top of it, an in-memory accessor double, and HTTP clients.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:    Settings pointing at a per-test SQLite file
    ├── database:         Database with tables created (disposed afterwards)
    ├── contact_service:  ContactService over `database`
    ├── fake_contacts:    FakeContactAccessor (no database at all)
    ├── test_client:      HTTPX AsyncClient → app wired to contact_service
    ├── fake_client:      HTTPX AsyncClient → app wired to fake_contacts
    └── contact_payload / contact_fields: the John Doe sample contact
"""

import os
import tempfile

# Override settings BEFORE any app imports: the module-level app and the
# settings singleton read the environment when first imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="contacts_test_"), "contacts.db"
)
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import uuid  # noqa: E402
from datetime import date, datetime, timezone  # noqa: E402
from typing import Any, Dict, List, Mapping, Optional  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import Database  # noqa: E402
from app.exceptions import NotFoundError, ValidationError  # noqa: E402
from app.main import create_app  # noqa: E402
from app.schemas.contact import ContactListItem, ContactResponse  # noqa: E402
from app.services.contact_base import ContactAccessor  # noqa: E402
from app.services.contact_service import ContactService, parse_contact_id  # noqa: E402
from app.services.validation import validate_contact  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Double
# ══════════════════════════════════════════════════════════════════════════


class FakeContactAccessor(ContactAccessor):
    """
    In-memory ContactAccessor.

    Runs the real validation rules and identifier parsing, keeps records in
    a dict, and enforces email uniqueness itself. Lets handler tests run
    without any database.
    """

    def __init__(self):
        self.records: Dict[uuid.UUID, Dict[str, Any]] = {}
        self.healthy = True

    async def list(self, color: Optional[str] = None, limit: int = 20) -> List[ContactListItem]:
        matches = [
            record for record in self.records.values()
            if color is None or record["favorite_color"] == color
        ]
        return [
            ContactListItem(
                first_name=record["first_name"],
                last_name=record["last_name"],
                email=record["email"],
                favorite_color=record["favorite_color"],
            )
            for record in matches[:limit]
        ]

    async def get_by_id(self, contact_id: str) -> ContactResponse:
        uid = parse_contact_id(contact_id)
        if uid not in self.records:
            raise NotFoundError(resource="contact", resource_id=str(uid))
        return ContactResponse(id=uid, **self.records[uid])

    def _check_unique(self, email: str, exclude: Optional[uuid.UUID] = None) -> None:
        for uid, record in self.records.items():
            if uid != exclude and record["email"] == email:
                raise ValidationError(message="Email already exists", field="email")

    async def create(self, fields: Mapping[str, Any]) -> str:
        cleaned = validate_contact(fields)
        self._check_unique(cleaned["email"])
        uid = uuid.uuid4()
        now = datetime.now(timezone.utc)
        self.records[uid] = {**cleaned, "created_at": now, "updated_at": now}
        return str(uid)

    async def update(self, contact_id: str, fields: Mapping[str, Any]) -> ContactResponse:
        uid = parse_contact_id(contact_id)
        cleaned = validate_contact(fields, partial=True)
        if uid not in self.records:
            raise NotFoundError(resource="contact", resource_id=str(uid))
        if "email" in cleaned:
            self._check_unique(cleaned["email"], exclude=uid)
        self.records[uid].update(cleaned, updated_at=datetime.now(timezone.utc))
        return ContactResponse(id=uid, **self.records[uid])

    async def delete(self, contact_id: str) -> None:
        uid = parse_contact_id(contact_id)
        if self.records.pop(uid, None) is None:
            raise NotFoundError(resource="contact", resource_id=str(uid))

    async def delete_all(self) -> int:
        removed = len(self.records)
        self.records.clear()
        return removed

    async def ping(self) -> bool:
        return self.healthy


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings with a fresh SQLite file per test (isolated state)."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}",
        environment="test",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """Database with the contacts table created; engine disposed afterwards."""
    db = Database(test_settings)
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def contact_service(database) -> ContactService:
    return ContactService(database)


@pytest.fixture
def fake_contacts() -> FakeContactAccessor:
    return FakeContactAccessor()


# ══════════════════════════════════════════════════════════════════════════
# HTTP Clients
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def test_client(test_settings, contact_service):
    """
    HTTPX AsyncClient talking to an app backed by the real ContactService.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(test_settings, accessor=contact_service)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def fake_client(test_settings, fake_contacts):
    """HTTPX AsyncClient talking to an app backed by FakeContactAccessor."""
    app = create_app(test_settings, accessor=fake_contacts)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Sample Data
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def contact_payload() -> Dict[str, str]:
    """The John Doe contact as a client sends it (camelCase JSON)."""
    return {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john@example.com",
        "favoriteColor": "Blue",
        "birthday": "1990-01-01",
    }


@pytest.fixture
def contact_fields() -> Dict[str, Any]:
    """The John Doe contact as accessor input (attribute names)."""
    return {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "favorite_color": "Blue",
        "birthday": date(1990, 1, 1),
    }
