"""Database configuration for the task backend."""
from sqlmodel import create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from dotenv import load_dotenv
import logging
import os

load_dotenv()

logger = logging.getLogger(__name__)

# Use the DATABASE_URL from environment variable, with fallback to SQLite for local dev
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./todo_app.db")


def build_engine(database_url: str = DATABASE_URL) -> Engine:
    """Create the SQLModel engine, enabling foreign keys on SQLite."""
    if database_url.startswith("sqlite"):
        logger.info(f"[DB CONFIG] Using SQLite database: {database_url}")
        engine = create_engine(database_url, echo=False, connect_args={"check_same_thread": False})

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    logger.info("[DB CONFIG] Using PostgreSQL database")
    return create_engine(database_url, echo=False, pool_pre_ping=True)


engine = build_engine()
