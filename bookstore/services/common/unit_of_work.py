"""
Unit of Work pattern implementation.

One scope owns one SQLAlchemy session and one transaction. Every
repository handed out inside the scope shares that session, so their
mutations commit or roll back together.
"""
from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookstore.core.exceptions import ConflictError, StateError, StoreError
from bookstore.models.base import BaseModel
from bookstore.repositories import REPOSITORY_REGISTRY
from bookstore.repositories.base import GenericRepository

logger = logging.getLogger(__name__)


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Transaction scope coordinating repositories.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     authors = uow.repository(Author)
        ...     authors.add(Author(firstname="Ursula", lastname="Le Guin"))
        ...     keys = uow.commit()   # {"Author": [1]}

    Auto-commit on success:
        >>> with UnitOfWork(session_factory) as uow:
        ...     uow.repository(Book).remove(3)
        ...     # Commits on __exit__ if no exception

    A scope is closed by ``commit`` or ``rollback`` and may be begun again.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        auto_commit: bool = True,
        repositories: Optional[Mapping[Type[BaseModel], Type[GenericRepository]]] = None,
    ) -> None:
        """
        Initialize Unit of Work.

        Args:
            session_factory: Factory function that returns a new Session
            auto_commit: Whether to commit on a clean context exit
            repositories: Repository class per entity class
        """
        self._session_factory = session_factory
        self._auto_commit = auto_commit
        self._registry = dict(REPOSITORY_REGISTRY if repositories is None else repositories)

        self.session: Optional[Session] = None
        self._added: List[BaseModel] = []
        self._repo_cache: Dict[Type[BaseModel], GenericRepository] = {}

    # ------------------------------------------------------------------ #
    # Context manager protocol
    # ------------------------------------------------------------------ #

    def __enter__(self) -> "UnitOfWork":
        return self.begin()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.dispose(exc_val)
        return False

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def begin(self) -> "UnitOfWork":
        """
        Open a session and start a transaction.

        Raises:
            StateError: If a scope is already open
        """
        if self.session is not None:
            raise StateError("UnitOfWork scope already open")

        self.session = self._session_factory()
        self._added = []
        self._repo_cache.clear()
        logger.debug("UnitOfWork session started")
        return self

    def commit(self) -> Dict[str, List[Any]]:
        """
        Flush and commit everything staged in this scope.

        Returns:
            Generated keys of the entities added in this scope, grouped by
            entity class name, in the order they were added

        Raises:
            StateError: If no scope is open
            ConflictError: If the store rejected a constraint
            StoreError: For any other store failure
        """
        session = self._require_session("commit")

        try:
            session.commit()
        except IntegrityError as exc:
            logger.warning(f"Commit rejected by constraint: {exc.orig}")
            self._abort()
            raise ConflictError(
                "Commit violates a store constraint",
                details={"error_type": type(exc).__name__},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error(f"Commit failed: {exc}")
            self._abort()
            raise StoreError("Failed to commit transaction", exc) from exc

        keys: Dict[str, List[Any]] = {}
        for entity in self._added:
            if inspect(entity).was_deleted:
                continue
            keys.setdefault(type(entity).__name__, []).append(entity.id)

        self._close()
        logger.debug("UnitOfWork committed")
        return keys

    def rollback(self) -> None:
        """
        Discard everything staged in this scope and close it.

        Never raises: a failing driver rollback is logged and the session is
        closed anyway, which releases the connection without committing.
        """
        if self.session is None:
            return
        self._abort()
        logger.debug("UnitOfWork rolled back")

    def dispose(self, exc: Optional[BaseException] = None) -> None:
        """
        Close the scope if it is still open.

        Error exits roll back. Clean exits commit when ``auto_commit`` is
        set and roll back otherwise.
        """
        if self.session is None:
            return

        if exc is not None:
            logger.warning(f"UnitOfWork rolled back due to {type(exc).__name__}")
            self.rollback()
        elif self._auto_commit:
            self.commit()
        else:
            self.rollback()

    def flush(self) -> None:
        """
        Push staged changes to the store without committing.

        Assigns generated keys to added entities.
        """
        session = self._require_session("flush")
        try:
            session.flush()
        except IntegrityError as exc:
            logger.warning(f"Flush rejected by constraint: {exc.orig}")
            raise ConflictError(
                "Change violates a store constraint",
                details={"error_type": type(exc).__name__},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error(f"Flush failed: {exc}")
            raise StoreError("Failed to flush changes", exc) from exc

    # ------------------------------------------------------------------ #
    # Repository factory
    # ------------------------------------------------------------------ #

    def repository(self, entity_cls: Type[BaseModel]) -> GenericRepository:
        """
        Repository for ``entity_cls`` bound to this scope's session.

        Repeated calls within one scope return the same instance.

        Raises:
            StateError: If no scope is open
        """
        session = self._require_session("repository")

        if entity_cls in self._repo_cache:
            return self._repo_cache[entity_cls]

        repo_cls = self._registry.get(entity_cls)
        if repo_cls is None:
            repo = GenericRepository(session, model=entity_cls, added=self._added)
        else:
            repo = repo_cls(session, added=self._added)
        self._repo_cache[entity_cls] = repo

        logger.debug(f"Created repository: {type(repo).__name__}")
        return repo

    # ------------------------------------------------------------------ #
    # Utility properties
    # ------------------------------------------------------------------ #

    @property
    def is_active(self) -> bool:
        """Check if the UnitOfWork has an open scope."""
        return self.session is not None

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _require_session(self, operation: str) -> Session:
        if self.session is None:
            raise StateError(f"UnitOfWork.{operation}() called outside of a scope")
        return self.session

    def _abort(self) -> None:
        try:
            self.session.rollback()
        except SQLAlchemyError as exc:
            logger.error(f"Rollback failed: {exc}")
        finally:
            self._close()

    def _close(self) -> None:
        try:
            self.session.close()
        except SQLAlchemyError as exc:
            logger.error(f"Closing session failed: {exc}")
        finally:
            self.session = None
            self._added = []
            self._repo_cache.clear()
