"""User service: CRUD and lookups over a UserRepository.

The repository and bcrypt calls block, so each one runs in a worker thread;
these are the only points where a request yields.
"""

import asyncio
import logging
from dataclasses import replace

from domain.model.user import User, UserFields
from port.user_repository import UserRepository
from services.auth_service import hash_password

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def get_all_users(self) -> list[User]:
        return await asyncio.to_thread(self.repo.find_many)

    async def get_user_by_id(self, user_id: int) -> User | None:
        """Return the user, or None when no user has this id."""
        return await asyncio.to_thread(self.repo.find_by_id, user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        return await asyncio.to_thread(self.repo.find_by_email, email)

    async def create_user(self, fields: UserFields) -> User:
        """Hash the password and insert the user.

        Raises:
            BackendError: the store rejected the insert (e.g. duplicate email)
        """
        hashed = await asyncio.to_thread(hash_password, fields.password)
        user = await asyncio.to_thread(self.repo.create, replace(fields, password=hashed))
        logger.info("User registered", extra={"userId": user.id, "email": user.email})
        return user

    async def update_user(self, fields: UserFields, user_id: int) -> User:
        """Replace all mutable fields, rehashing the submitted password.

        Raises:
            BackendError: no user with this id, or the store rejected the write
        """
        hashed = await asyncio.to_thread(hash_password, fields.password)
        user = await asyncio.to_thread(self.repo.update, user_id, replace(fields, password=hashed))
        logger.info("User updated", extra={"userId": user_id})
        return user

    async def delete_user(self, user_id: int) -> None:
        """Hard-delete a user.

        Raises:
            BackendError: no user with this id
        """
        await asyncio.to_thread(self.repo.delete, user_id)
        logger.info("User deleted", extra={"userId": user_id})
