"""
Identity store: user accounts behind the auth gateway.

The gateway only sees the ``IdentityStore`` protocol. ``SqlIdentityStore``
keeps accounts in the application database next to the catalog.
"""

from typing import Callable, Iterable, Optional, Protocol, runtime_checkable

from bookstore.core.exceptions import ConflictError
from bookstore.core.logging import get_logger
from bookstore.models.user import User
from bookstore.schemas.auth.login import UserRead
from bookstore.services.common.permissions import Principal, Roles
from bookstore.services.common.security import PasswordHasher
from bookstore.services.common.unit_of_work import UnitOfWork

logger = get_logger(__name__)


@runtime_checkable
class IdentityStore(Protocol):
    def verify_credentials(self, email: str, password: str) -> Optional[Principal]:
        """Return the principal for valid credentials, None otherwise."""
        ...


def _user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        email=user.email,
        roles=sorted(user.role_names),
        is_active=user.is_active,
    )


class SqlIdentityStore:
    """Accounts stored in the ``users`` and ``user_roles`` tables."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork], hasher: PasswordHasher):
        self.uow_factory = uow_factory
        self.hasher = hasher

    def verify_credentials(self, email: str, password: str) -> Optional[Principal]:
        with self.uow_factory() as uow:
            user = uow.repository(User).find_by_email(email)
            if user is None or not user.is_active:
                return None
            if not self.hasher.verify(password, user.password_hash):
                return None
            return Principal(
                user_id=str(user.id),
                roles=user.role_names,
                email=user.email,
            )

    def register(
        self,
        email: str,
        password: str,
        roles: Iterable[str] = (Roles.CUSTOMER,),
    ) -> UserRead:
        """
        Create an account.

        Raises:
            ConflictError: If the email is already registered
            ValidationError: If the password is empty
        """
        email = email.strip().lower()
        password_hash = self.hasher.hash(password)

        with self.uow_factory() as uow:
            users = uow.repository(User)
            if users.exists_by_email(email):
                raise ConflictError(
                    f"Email '{email}' is already registered",
                    details={"field": "email"},
                )
            user = users.add(User(email=email, password_hash=password_hash, is_active=True))
            users.assign_roles(user, roles)
            uow.flush()
            result = _user_read(user)
            uow.commit()

        logger.info("User registered", user_id=result.id, roles=result.roles)
        return result

    def ensure_user(self, email: str, password: str, roles: Iterable[str]) -> UserRead:
        """
        Create the account if missing, otherwise add any missing roles.

        The password of an existing account is left untouched.
        """
        roles = list(roles)
        with self.uow_factory() as uow:
            users = uow.repository(User)
            user = users.find_by_email(email)
            if user is None:
                user = users.add(
                    User(
                        email=email.strip().lower(),
                        password_hash=self.hasher.hash(password),
                        is_active=True,
                    )
                )
                logger.info("Seeding user account", email=email)
            users.assign_roles(user, roles)
            uow.flush()
            result = _user_read(user)
            uow.commit()
        return result
