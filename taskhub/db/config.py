"""Database configuration for the snapshot persister."""
from sqlmodel import create_engine
import os
import logging
from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./taskhub.db")


def create_db_engine(database_url: str = DATABASE_URL) -> Engine:
    """Create an engine; SQLite connections get WAL journaling and cross-thread access."""
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False, pool_pre_ping=True)

    db_engine = create_engine(database_url, echo=False, connect_args={"check_same_thread": False})

    @event.listens_for(db_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return db_engine


if DATABASE_URL.startswith("postgresql"):
    logger.info("[DB CONFIG] Using PostgreSQL database")
else:
    logger.info(f"[DB CONFIG] Using database: {DATABASE_URL}")

engine = create_db_engine(DATABASE_URL)
