"""
Authenticated principal and role checks.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional


class Roles:
    """Role names known to the application."""
    ADMINISTRATOR = "Administrator"
    CUSTOMER = "Customer"


@dataclass(frozen=True)
class Principal:
    """
    Authenticated caller, produced only by the auth gateway.

    Attributes:
        user_id: Token subject
        roles: Role names granted to the caller
        email: Email claim, when present
    """
    user_id: str
    roles: FrozenSet[str]
    email: Optional[str] = None

    def has_role(self, role: str) -> bool:
        return role in self.roles

