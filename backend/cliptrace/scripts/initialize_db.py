"""
Initialize the ClipTrace relational store.

- Waits for the database to accept connections
- Creates the tables
- Seeds the demo movie, scene and search history
- Runs exactly once (idempotent: seeding is skipped when movies exist)
"""

import logging
import time

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from cliptrace import config
from cliptrace.storage.relational import DatabaseStorage

logger = logging.getLogger(__name__)

# CONFIG
MAX_DB_WAIT_SECONDS = 180
DB_RETRY_INTERVAL = 2


def wait_for_db(engine, max_wait: float = MAX_DB_WAIT_SECONDS, interval: float = DB_RETRY_INTERVAL):
    """Block until the database is accepting connections."""
    logger.info("Waiting for the database to be ready...")

    deadline = time.time() + max_wait

    while time.time() < deadline:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database is ready.")
            return
        except OperationalError:
            logger.info("Database not ready yet. Retrying...")
            time.sleep(interval)

    raise RuntimeError("Database did not become ready in time")


def main(database_url: str = None) -> DatabaseStorage:
    logging.basicConfig(level=config.LOG_LEVEL)

    store = DatabaseStorage(database_url=database_url or config.DATABASE_URL)
    wait_for_db(store.engine)
    store.initialize()

    logger.info("Database holds %d movies.", len(store.get_movies()))
    return store


if __name__ == "__main__":
    main()
