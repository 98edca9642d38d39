from typing import Protocol

from domain.model.user import User, UserFields


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise BackendError on any store failure.
    """
    def find_many(self) -> list[User]:
        """Return all users ordered by id."""
        ...

    def find_by_id(self, user_id: int) -> User | None:
        """Find a user by ID. Return None if not found."""
        ...

    def find_by_email(self, email: str) -> User | None:
        """Find a user by email. Return None if not found."""
        ...

    def create(self, fields: UserFields) -> User:
        """Insert a user. The store assigns `id` and `created_at`."""
        ...

    def update(self, user_id: int, fields: UserFields) -> User:
        """Replace the mutable fields of an existing user."""
        ...

    def delete(self, user_id: int) -> None:
        """Hard-delete a user."""
        ...
