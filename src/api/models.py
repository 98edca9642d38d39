"""Pydantic models for API request/response.

Wire names are camelCase; Python attributes stay snake_case via aliases.
Request fields are StrictStr so only JSON strings pass validation.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from domain.model.user import User, UserFields


class UserRequest(BaseModel):
    """Request model for create, register and update."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: StrictStr = Field(..., alias="firstName")
    last_name: StrictStr = Field(..., alias="lastName")
    email: StrictStr
    password: StrictStr

    def to_fields(self) -> UserFields:
        return UserFields(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            password=self.password,
        )


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: StrictStr
    password: StrictStr


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            created_at=user.created_at,
        )


class LoginResponse(BaseModel):
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
