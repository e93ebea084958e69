import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import build_engine, create_tables

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

async def init_database():
    if not settings.DATABASE_URL:
        logger.error("DATABASE_URL is not set")
        sys.exit(1)

    logger.info("Connecting to database...")
    engine = build_engine(settings.DATABASE_URL)

    logger.info("Creating tables...")
    await create_tables(engine)
    logger.info("Tables created successfully.")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(init_database())
