import asyncio
import logging
import sys

from sqlalchemy.exc import OperationalError

from core.database import engine
from models import Base

logger = logging.getLogger(__name__)


async def init_models(reset: bool = False):
    retries = 5
    while retries > 0:
        try:
            async with engine.begin() as conn:
                if reset:
                    logger.info("Dropping all tables...")
                    await conn.run_sync(Base.metadata.drop_all)

                logger.info("Creating tables...")
                await conn.run_sync(Base.metadata.create_all)

            logger.info("Database initialization complete.")
            return
        except OperationalError as e:
            logger.warning("Database not ready yet (%s), retrying in 2 seconds...", e)
            retries -= 1
            await asyncio.sleep(2)

    logger.error("Could not connect to database after retries.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    reset = "--reset" in sys.argv
    asyncio.run(init_models(reset=reset))
