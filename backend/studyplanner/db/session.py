import logging
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from studyplanner.core.config import get_settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs: Any) -> Engine:
    """Create an engine with the connect args each backend needs.

    SQLite connections are handed across FastAPI's threadpool, and an
    in-memory SQLite database only survives on a single shared connection.
    """
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs.setdefault("poolclass", StaticPool)
    else:
        kwargs.setdefault("pool_pre_ping", True)
    logger.debug(f"Database engine for {database_url.split(':', 1)[0]}")
    return create_engine(database_url, **kwargs)


engine = build_engine(get_settings().database_url)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
