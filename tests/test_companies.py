"""
Tests for company lookup and the user -> company mapping.
"""
from sqlalchemy import inspect, select

from app.features.companies.models import Company
from app.features.companies.service import count_company_users, get_or_create_company
from app.features.users.models import User


async def test_get_or_create_company_reuses_existing_name(db):
    first = await get_or_create_company(db, "Acme")
    second = await get_or_create_company(db, "Acme")
    other = await get_or_create_company(db, "Globex")

    assert first.id == second.id
    assert other.id != first.id


async def test_count_company_users(db, user, company):
    assert await count_company_users(db, company.id) == 1
    assert await count_company_users(db, "no-such-company") == 0


def test_company_has_no_users_collection():
    assert "users" not in inspect(Company).relationships


async def test_user_loads_its_company(db, user, company):
    db.expire_all()

    loaded = await db.scalar(select(User).where(User.id == user.id))

    assert loaded.company.name == "Initech"
