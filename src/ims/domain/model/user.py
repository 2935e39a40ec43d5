"""User aggregate and the principal handed in by the auth provider."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ims.domain.exceptions import PermissionDeniedError, ValidationError
from ims.domain.model.common import new_id


class Role(Enum):
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"


@dataclass
class User:
    """An account. ``password_hash`` is a bcrypt hash, never a raw password."""

    id: str
    username: str
    email: str
    password_hash: str
    role: Role = Role.CUSTOMER
    full_name: str = ""
    enabled: bool = True

    @staticmethod
    def create(
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.CUSTOMER,
        full_name: str = "",
    ) -> User:
        if not username or not username.strip():
            raise ValidationError("Username is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email address: {email!r}")
        return User(
            id=new_id(),
            username=username.strip(),
            email=email.strip(),
            password_hash=password_hash,
            role=role,
            full_name=full_name,
        )

    def toggle_enabled(self) -> None:
        self.enabled = not self.enabled


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as supplied by the external auth layer."""

    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def require_admin(self, action: str) -> None:
        if not self.is_admin:
            raise PermissionDeniedError(f"{action} requires the ADMIN role")


# Identity used by scheduled jobs and local administration.
SYSTEM = Principal(username="system", role=Role.ADMIN)
