"""
Seed script to create the default admin account.

Run once after init_db with env set:
  ADMIN_SEED_ID=ADMIN001
  ADMIN_SEED_PASSWORD=YourSecurePassword

Re-running updates the password and name of the existing admin instead of
creating a second one.
"""
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.auth.security import hash_password
from app.core.config import settings
from app.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


async def seed_admin(db: AsyncSession) -> None:
    password = settings.admin_seed_password
    if not password:
        logger.warning("ADMIN_SEED_PASSWORD not set; skipping admin seed.")
        return

    result = await db.execute(select(Admin).where(Admin.admin_id == settings.admin_seed_id))
    admin = result.scalar_one_or_none()
    if not admin:
        db.add(
            Admin(
                admin_id=settings.admin_seed_id,
                name=settings.admin_seed_name,
                email=settings.admin_seed_email,
                password_hash=hash_password(password),
            )
        )
        logger.info("Created admin %s", settings.admin_seed_id)
    else:
        admin.name = settings.admin_seed_name
        admin.password_hash = hash_password(password)
        if settings.admin_seed_email:
            admin.email = settings.admin_seed_email
        logger.info("Updated existing admin %s", settings.admin_seed_id)
    await db.commit()


async def main() -> None:
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception:
            await db.rollback()
            logger.exception("Admin seed failed")
            raise


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    asyncio.run(main())
