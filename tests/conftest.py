"""
Pytest configuration and shared fixtures.
"""

from functools import partial

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from bookstore.db.init_db import drop_db, init_db
from bookstore.db.session import build_session_factory, enable_sqlite_foreign_keys
from bookstore.models import Author, Book
from bookstore.services.common.security import JWTSettings, PasswordHasher
from bookstore.services.common.unit_of_work import UnitOfWork


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def uow_factory(session_factory):
    return partial(UnitOfWork, session_factory)


@pytest.fixture
def hasher():
    """Minimum bcrypt cost keeps the suite fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_settings():
    return JWTSettings(
        secret_key="test-secret-key-with-enough-entropy",
        issuer="bookstore-api",
        audience="bookstore-api",
        access_token_expires_minutes=60,
    )


@pytest.fixture
def seeded(uow_factory):
    """One author with two books. Returns their ids."""
    with uow_factory() as uow:
        author = uow.repository(Author).add(Author(firstname="Ursula", lastname="Le Guin"))
        uow.flush()
        books = uow.repository(Book)
        books.add(Book(title="The Dispossessed", isbn="9780061054884", year=1974, author_id=author.id))
        books.add(Book(title="The Lathe of Heaven", isbn="9781416556961", year=1971, author_id=author.id))
        keys = uow.commit()
    return {"author": keys["Author"][0], "books": keys["Book"]}


@pytest.fixture
def snapshot(uow_factory):
    """Returns a callable dumping every catalog row, for before/after comparisons."""

    def take():
        with uow_factory() as uow:
            return {
                "authors": [a.to_dict() for a in uow.repository(Author).get_all()],
                "books": [b.to_dict() for b in uow.repository(Book).get_all()],
            }

    return take
