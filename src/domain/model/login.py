"""Login outcome: returned by the authenticator instead of raising.

Route handlers map each variant to an HTTP status.
"""

from dataclasses import dataclass

from domain.model.user import User


@dataclass(frozen=True)
class LoginSuccess:
    user: User


@dataclass(frozen=True)
class UserNotFound:
    email: str


@dataclass(frozen=True)
class InvalidPassword:
    email: str


LoginResult = LoginSuccess | UserNotFound | InvalidPassword
