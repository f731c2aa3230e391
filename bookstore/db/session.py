"""Database engine and session factory construction."""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bookstore.config.settings import Settings


def build_engine(settings: Settings) -> Engine:
    """
    Create the engine described by ``settings``.

    SQLite connections get ``PRAGMA foreign_keys=ON`` so the store enforces
    book → author references the same way a server database does.
    """
    if settings.is_sqlite:
        engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            settings.DATABASE_URL,
            pool_pre_ping=True,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,
        )

    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return engine


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Sessions never expire on commit so mapped results stay readable."""
    return sessionmaker(
        bind=engine,
        autoflush=True,
        expire_on_commit=False,
    )
