from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserFields:
    """Mutable user fields accepted by create and update."""
    first_name: str
    last_name: str
    email: str
    password: str


@dataclass
class User:
    """Domain model representing a user account.

    `password` always holds a bcrypt hash, never the plaintext.
    """
    id: int
    first_name: str
    last_name: str
    email: str
    password: str
    created_at: datetime
