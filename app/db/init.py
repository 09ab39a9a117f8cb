"""Initialize database tables."""
from sqlmodel import SQLModel
from sqlalchemy.engine import Engine
import logging

from app.models.user import User  # noqa: F401
from app.models.task import Task  # noqa: F401
from app.db.config import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(engine: Engine = default_engine):
    """Create all tables in the database."""
    logger.info("[DB INIT] Creating all tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("[DB INIT] Tables created successfully.")


if __name__ == "__main__":
    init_db()
