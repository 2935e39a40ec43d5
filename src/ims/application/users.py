"""Application service: user accounts.

All account management is ADMIN-only. Passwords are stored as bcrypt
hashes; raw passwords only pass through this module.
"""

from __future__ import annotations

import logging
import secrets
import string

import bcrypt

from ims.domain.exceptions import AlreadyExistsError, EntityNotFoundError, ValidationError
from ims.domain.model.user import SYSTEM, Principal, Role, User
from ims.domain.repository.user_repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
RESET_PASSWORD_LENGTH = 8
_RESET_ALPHABET = string.ascii_letters + string.digits


class PasswordHasher:
    """bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed hash
            return False


class UserService:

    def __init__(self, user_repo: UserRepository, hasher: PasswordHasher) -> None:
        self._user_repo = user_repo
        self._hasher = hasher

    def create(
        self,
        username: str,
        email: str,
        password: str,
        role: Role = Role.CUSTOMER,
        full_name: str = "",
        *,
        actor: Principal = SYSTEM,
    ) -> User:
        actor.require_admin("Creating users")
        if self._user_repo.get_by_username(username.strip()) is not None:
            raise AlreadyExistsError(f"Username already exists: {username.strip()}")
        if self._user_repo.get_by_email(email.strip()) is not None:
            raise AlreadyExistsError(f"Email already exists: {email.strip()}")
        _check_password_length(password)

        user = User.create(
            username=username,
            email=email,
            password_hash=self._hasher.hash(password),
            role=role,
            full_name=full_name,
        )
        self._user_repo.save(user)
        logger.info("User %s created with role %s", user.username, user.role.value)
        return user

    def update(
        self,
        user_id: str,
        email: str | None = None,
        full_name: str | None = None,
        role: Role | None = None,
        *,
        actor: Principal = SYSTEM,
    ) -> User:
        actor.require_admin("Updating users")
        user = self.get(user_id, actor=actor)

        if email is not None and email.strip().lower() != user.email.lower():
            if self._user_repo.get_by_email(email.strip()) is not None:
                raise AlreadyExistsError(f"Email already exists: {email.strip()}")
            if "@" not in email:
                raise ValidationError(f"Invalid email address: {email!r}")
            user.email = email.strip()
        if full_name is not None:
            user.full_name = full_name
        if role is not None:
            user.role = role

        self._user_repo.save(user)
        return user

    def toggle_enabled(self, user_id: str, *, actor: Principal = SYSTEM) -> User:
        actor.require_admin("Enabling or disabling users")
        user = self.get(user_id, actor=actor)
        user.toggle_enabled()
        self._user_repo.save(user)
        logger.info("User %s %s", user.username, "enabled" if user.enabled else "disabled")
        return user

    def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str,
        *,
        actor: Principal = SYSTEM,
    ) -> None:
        actor.require_admin("Changing passwords")
        user = self.get(user_id, actor=actor)

        if not self._hasher.verify(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")
        _check_password_length(new_password)
        if current_password == new_password:
            raise ValidationError("New password must be different from the current password")

        user.password_hash = self._hasher.hash(new_password)
        self._user_repo.save(user)

    def reset_password(self, user_id: str, *, actor: Principal = SYSTEM) -> str:
        """Replace the password with a random one and return it."""
        actor.require_admin("Resetting passwords")
        user = self.get(user_id, actor=actor)
        password = "".join(
            secrets.choice(_RESET_ALPHABET) for _ in range(RESET_PASSWORD_LENGTH)
        )
        user.password_hash = self._hasher.hash(password)
        self._user_repo.save(user)
        logger.info("Password reset for user %s", user.username)
        return password

    def delete(self, user_id: str, *, actor: Principal = SYSTEM) -> None:
        actor.require_admin("Deleting users")
        self.get(user_id, actor=actor)
        self._user_repo.delete(user_id)

    def verify_credentials(self, username: str, password: str) -> User | None:
        """Return the enabled user matching the credentials, else None."""
        user = self._user_repo.get_by_username(username)
        if user is None or not user.enabled:
            return None
        if not self._hasher.verify(password, user.password_hash):
            return None
        return user

    # --- Queries --------------------------------------------------------------

    def get(self, user_id: str, *, actor: Principal = SYSTEM) -> User:
        actor.require_admin("Viewing users")
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError(f"User not found with id: {user_id}")
        return user

    def get_by_username(self, username: str, *, actor: Principal = SYSTEM) -> User:
        actor.require_admin("Viewing users")
        user = self._user_repo.get_by_username(username)
        if user is None:
            raise EntityNotFoundError(f"User not found with username: {username}")
        return user

    def list_all(self, *, actor: Principal = SYSTEM) -> list[User]:
        actor.require_admin("Listing users")
        return self._user_repo.list_all()


def _check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
