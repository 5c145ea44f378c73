"""
Database engine creation and schema initialization.
"""
import logging
from pathlib import Path
from typing import Dict

from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

logger = logging.getLogger(__name__)

# Engine cache, one per database URL
_engines: Dict[str, Engine] = {}


def create_db_engine(database_url: str) -> Engine:
    """
    Create a new engine for database_url.

    SQLite file databases get their parent directory created. In-memory
    SQLite uses a single shared connection so every session sees the same
    tables.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=False)

    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def get_engine(database_url: str) -> Engine:
    """Get or create the cached engine for database_url."""
    if database_url not in _engines:
        _engines[database_url] = create_db_engine(database_url)
        logger.info(f"Database engine created for {make_url(database_url).render_as_string(hide_password=True)}")
    return _engines[database_url]


def init_db(engine: Engine) -> None:
    """Create the companies and events tables if they do not exist."""
    from .models import Company, Event  # noqa: F401  (registers tables)
    SQLModel.metadata.create_all(engine)
