"""
Create any missing tables and indexes.

Run once per environment:
  python -m app.db.schema_check
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from app.core import models  # noqa: F401  (registers tables on Base.metadata)
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.db.session import Base, engine

logger = logging.getLogger(__name__)


async def ensure_schema(db_engine: AsyncEngine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


async def main() -> None:
    setup_logging(settings.log_level)
    try:
        await ensure_schema(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
