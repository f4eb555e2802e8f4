"""
Shared fixtures.

Each test gets its own SQLite file database; the app's get_db dependency is
overridden to use it. Settings are forced before the app is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.database.base import Base
from app.core.database.engine import get_db, import_models
from app.features.auth.credentials import hash_password
from app.features.companies.models import Company
from app.features.users.models import User
from app.main import app
from helpers import register


@pytest.fixture
async def engine(tmp_path):
    """Create a fresh database with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client_factory(session_factory):
    """Build independent HTTP clients; each keeps its own session cookie."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def make_client() -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        clients.append(client)
        return client

    yield make_client

    for client in clients:
        await client.aclose()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory):
    return client_factory()


@pytest.fixture
async def company(db):
    company = Company(name="Initech")
    db.add(company)
    await db.commit()
    await db.refresh(company)
    return company


@pytest.fixture
async def user(db, company):
    user = User(username="peter", password_hash=hash_password("tps-report"), company_id=company.id)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def alice(client_factory):
    """Admin of Acme."""
    client = client_factory()
    client.user = await register(client, "alice", "x", "Acme")
    return client


@pytest.fixture
async def bob(client_factory, alice):
    """Regular user of Acme."""
    client = client_factory()
    client.user = await register(client, "bob", "y", "Acme")
    return client


@pytest.fixture
async def mallory(client_factory):
    """Admin of another company."""
    client = client_factory()
    client.user = await register(client, "mallory", "z", "Globex")
    return client
