"""
Company lookup helpers.
"""
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.companies.models import Company
from app.features.users.models import User
from app.utils import get_logger


log = get_logger(__name__)


async def get_or_create_company(db: AsyncSession, name: str) -> Company:
    """
    Return the company called `name`, creating it if it does not exist.

    Company names are unique; a concurrent insert of the same name is
    reconciled by re-reading the winner's row.
    """
    company = await db.scalar(select(Company).where(Company.name == name))
    if company is not None:
        return company

    company = Company(name=name)
    db.add(company)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        company = await db.scalar(select(Company).where(Company.name == name))
        if company is None:
            raise
        return company

    await db.refresh(company)
    log.info(f"Created company {company.id} ({name!r})")
    return company


async def count_company_users(db: AsyncSession, company_id: str) -> int:
    return await db.scalar(
        select(func.count()).select_from(User).where(User.company_id == company_id)
    )
