from bookstore.db.base import Base
from bookstore.db.init_db import drop_db, init_db
from bookstore.db.session import build_engine, build_session_factory

__all__ = ["Base", "build_engine", "build_session_factory", "init_db", "drop_db"]
