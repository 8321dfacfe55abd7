"""Create all tables for a fresh database: ``python -m studyplanner.init_db``.

Existing tables are left untouched; new tables are added alongside them.
"""

import logging

from sqlalchemy import inspect

from studyplanner import models  # noqa: F401  registers the mappers
from studyplanner.db.base import Base
from studyplanner.db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> list[str]:
    existing = set(inspect(engine).get_table_names())
    missing = sorted(set(Base.metadata.tables) - existing)
    if not missing:
        logger.info("Database is up to date")
        return []
    Base.metadata.create_all(bind=engine)
    logger.info(f"Created tables: {', '.join(missing)}")
    return missing


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
