"""
Seed script to create the default roles.

Run this script after database initialization to create:
- The bootstrap "admin" and "user" roles (otherwise created on first registration)
- Extra roles such as a read-only "viewer"

Existing roles are left untouched; role permissions are fixed once created.

Usage:
    python -m scripts.seed_roles
"""
import asyncio

from app.core.database.engine import AsyncSessionLocal, init_db
from app.features.permissions.registry import RoleRegistry
from app.features.permissions.schemas import RolePermissions
from app.utils import get_logger


log = get_logger(__name__)


EXTRA_ROLES = {
    "viewer": {
        "description": "Read-only access to the company's objects",
        "permissions": RolePermissions(read=True),
    },
    "editor": {
        "description": "Create and update objects, no deletes",
        "permissions": RolePermissions(create=True, read=True, update=True),
    },
}


async def seed_roles(registry: RoleRegistry) -> None:
    """Create bootstrap and extra roles if they do not exist yet."""
    admin, user = await registry.ensure_bootstrap_roles()
    log.info(f"Bootstrap roles present: {admin.name}, {user.name}")

    for role_name, role_config in EXTRA_ROLES.items():
        role = await registry.ensure_role(role_name, role_config["permissions"])
        log.info(f"  - {role.name}: {role_config['description']}")


async def main():
    """Main function to seed roles."""
    log.info("Starting role seeding...")

    # Initialize database tables first
    log.info("Initializing database tables...")
    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            await seed_roles(RoleRegistry(db))
        except Exception as e:
            log.error(f"Error seeding roles: {e}", exc_info=True)
            await db.rollback()
            raise

    log.info("Role seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
