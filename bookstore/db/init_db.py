"""Database initialization utilities."""
import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from bookstore.db.base import Base, import_models

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """
    Create any missing tables.

    Note: This is suitable for development/testing only.
    """
    import_models()

    existing_tables = set(inspect(engine).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing_tables]
    if not missing:
        logger.info(f"Database already initialized with {len(existing_tables)} tables")
        return

    Base.metadata.create_all(bind=engine)
    logger.info(f"Created tables: {', '.join(missing)}")


def drop_db(engine: Engine) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data!
    """
    import_models()
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
