"""
Composition root.

Builds every collaborator once per application from the settings and an
engine. Nothing below this module looks up its dependencies globally.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bookstore.config.settings import Settings
from bookstore.db.session import build_engine, build_session_factory
from bookstore.services.auth.auth_gateway import AuthGateway
from bookstore.services.auth.identity_store import SqlIdentityStore
from bookstore.services.catalog.author_service import AuthorService
from bookstore.services.catalog.book_service import BookService
from bookstore.services.common.permissions import Roles
from bookstore.services.common.security import JWTSettings, PasswordHasher
from bookstore.services.common.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    uow_factory: Callable[[], UnitOfWork]
    identity_store: SqlIdentityStore
    gateway: AuthGateway
    authors: AuthorService
    books: BookService

    @classmethod
    def build(cls, settings: Settings, engine: Optional[Engine] = None) -> "AppContainer":
        engine = engine or build_engine(settings)
        session_factory = build_session_factory(engine)
        uow_factory = partial(UnitOfWork, session_factory)

        identity_store = SqlIdentityStore(
            uow_factory,
            PasswordHasher(rounds=settings.PASSWORD_BCRYPT_ROUNDS),
        )
        gateway = AuthGateway(JWTSettings.from_settings(settings), identity_store)

        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            uow_factory=uow_factory,
            identity_store=identity_store,
            gateway=gateway,
            authors=AuthorService(uow_factory),
            books=BookService(uow_factory),
        )

    def seed_admin(self) -> None:
        """Create the administrator account named in the settings, if any."""
        email, password = self.settings.ADMIN_EMAIL, self.settings.ADMIN_PASSWORD
        if not email or not password:
            return
        self.identity_store.ensure_user(email, password, [Roles.ADMINISTRATOR, Roles.CUSTOMER])
        logger.info(f"Administrator account ready: {email}")
