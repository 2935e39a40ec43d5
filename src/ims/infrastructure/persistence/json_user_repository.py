"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from ims.domain.model.user import Role, User
from ims.domain.repository.user_repository import UserRepository
from ims.infrastructure.persistence.json_file import JsonFileRepository


class JsonUserRepository(JsonFileRepository[User], UserRepository):

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one(lambda raw: raw["id"] == user_id)

    def get_by_username(self, username: str) -> User | None:
        return self._find_one(lambda raw: raw["username"] == username)

    def get_by_email(self, email: str) -> User | None:
        return self._find_one(lambda raw: raw["email"].lower() == email.lower())

    def list_all(self) -> list[User]:
        return self._find_all()

    def save(self, user: User) -> None:
        self._upsert(user.id, user)

    def delete(self, user_id: str) -> None:
        self._remove(lambda raw: raw["id"] == user_id)

    @staticmethod
    def _to_raw(user: User) -> dict:
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "password_hash": user.password_hash,
            "role": user.role.value,
            "full_name": user.full_name,
            "enabled": user.enabled,
        }

    @staticmethod
    def _to_domain(raw: dict) -> User:
        return User(
            id=raw["id"],
            username=raw["username"],
            email=raw["email"],
            password_hash=raw["password_hash"],
            role=Role(raw["role"]),
            full_name=raw.get("full_name", ""),
            enabled=raw.get("enabled", True),
        )
