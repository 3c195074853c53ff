"""
Seed script to create the first admin scanner account.

Run once (after schema_check) with env set:
  INITIAL_ADMIN_USERNAME=admin
  INITIAL_ADMIN_PASSWORD=YourSecurePassword

Does nothing if an account with that username already exists.
"""
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.scanners.schemas import ScannerAccountCreate
from app.api.v1.scanners.service import create_scanner_account
from app.core.config import settings
from app.core.enums import ScannerRole
from app.core.logging_config import setup_logging
from app.core.models import ScannerAccount
from app.db.session import AsyncSessionLocal, engine

logger = logging.getLogger(__name__)


async def seed_admin(db: AsyncSession, username: str, password: str) -> bool:
    """Returns True when a new admin account was created."""
    result = await db.execute(select(ScannerAccount).where(ScannerAccount.username == username))
    if result.scalar_one_or_none():
        logger.info("Admin account %s already exists.", username)
        return False
    await create_scanner_account(
        db,
        ScannerAccountCreate(username=username, password=password, role=ScannerRole.ADMIN),
    )
    logger.info("Created admin account %s.", username)
    return True


async def main() -> None:
    setup_logging(settings.log_level)
    if not settings.initial_admin_username or not settings.initial_admin_password:
        logger.error("INITIAL_ADMIN_USERNAME and INITIAL_ADMIN_PASSWORD must be set")
        return
    try:
        async with AsyncSessionLocal() as db:
            await seed_admin(db, settings.initial_admin_username, settings.initial_admin_password)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
