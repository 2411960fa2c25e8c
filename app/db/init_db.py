"""
Create every table from the model metadata. Safe to re-run; existing tables are left alone.

  python -m app.db.init_db
"""
import asyncio
import logging

from app.core.config import settings
from app.db.session import create_all, engine

logger = logging.getLogger(__name__)


async def main() -> None:
    try:
        await create_all(engine)
        logger.info("Tables created.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    asyncio.run(main())
