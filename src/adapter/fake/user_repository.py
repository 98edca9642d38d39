"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from domain.model.errors import BackendError
from domain.model.user import User, UserFields

UNIQUE_EMAIL_MESSAGE = "Unique constraint failed on the fields: (`email`)"


class FakeUserRepository:
    def __init__(self):
        self.store: dict[int, User] = {}
        self._next_id = 1

    def _email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        return any(
            u.email == email and u.id != exclude_id for u in self.store.values()
        )

    # ── write operations ─────────────────────────────────────

    def create(self, fields: UserFields) -> User:
        if self._email_taken(fields.email):
            raise BackendError(UNIQUE_EMAIL_MESSAGE)

        user = User(
            id=self._next_id,
            first_name=fields.first_name,
            last_name=fields.last_name,
            email=fields.email,
            password=fields.password,
            created_at=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self.store[user.id] = user
        return user

    def update(self, user_id: int, fields: UserFields) -> User:
        existing = self.store.get(user_id)
        if existing is None:
            raise BackendError("Record to update not found.")
        if self._email_taken(fields.email, exclude_id=user_id):
            raise BackendError(UNIQUE_EMAIL_MESSAGE)

        user = replace(
            existing,
            first_name=fields.first_name,
            last_name=fields.last_name,
            email=fields.email,
            password=fields.password,
        )
        self.store[user_id] = user
        return user

    def delete(self, user_id: int) -> None:
        if self.store.pop(user_id, None) is None:
            raise BackendError("Record to delete does not exist.")

    # ── read operations ──────────────────────────────────────

    def find_many(self) -> list[User]:
        return [self.store[key] for key in sorted(self.store)]

    def find_by_id(self, user_id: int) -> User | None:
        return self.store.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None
