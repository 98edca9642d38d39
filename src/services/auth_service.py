"""Auth service: password hashing and credential checks.

Pure business logic with no HTTP dependencies. `authenticate` never raises
for bad credentials; it returns a LoginResult that route handlers map to
HTTP status codes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import bcrypt

from domain.model.login import InvalidPassword, LoginResult, LoginSuccess, UserNotFound

if TYPE_CHECKING:
    from services.user_service import UserService

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only reads this many bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return False on mismatch, including a stored hash bcrypt cannot parse."""
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError as e:
        logger.warning("Password check failed on malformed hash", extra={"error": str(e)})
        return False


async def authenticate(service: UserService, email: str, password: str) -> LoginResult:
    """Check an email/password pair against the stored hash.

    Returns:
        LoginSuccess with the full user record, UserNotFound when no user
        has this email, or InvalidPassword when the hash does not match.
    """
    user = await service.get_user_by_email(email)
    if user is None:
        logger.info("Login rejected: user not found", extra={"email": email})
        return UserNotFound(email)

    if not await asyncio.to_thread(verify_password, password, user.password):
        logger.info("Login rejected: invalid password", extra={"userId": user.id, "email": email})
        return InvalidPassword(email)

    logger.info("User logged in", extra={"userId": user.id, "email": email})
    return LoginSuccess(user)
