"""User routes: CRUD plus register and login.

Endpoints:
- GET /users: List users
- GET /users/{user_id}: Get a user
- POST /users, POST /users/register: Create a user
- POST /users/login: Check email and password
- PUT /users/{user_id}: Replace a user's fields
- DELETE /users/{user_id}: Delete a user

Any error raised while handling a request is answered with 500 and its
message.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from fastapi.responses import JSONResponse

from api.dependencies import get_user_service
from api.models import LoginRequest, LoginResponse, MessageResponse, UserRequest, UserResponse
from domain.model.login import InvalidPassword, UserNotFound
from services.auth_service import authenticate
from services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

LOGIN_SUCCESS_MESSAGE = "Login Successfull"

# MongoDB stores ids as signed 64-bit integers
UserId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def _server_error(action: str, error: Exception, **context) -> JSONResponse:
    logger.exception(f"Failed to {action}", extra={"error": str(error), **context})
    return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, str(error))


@router.get("", response_model=list[UserResponse])
async def list_users(service: UserService = Depends(get_user_service)):
    """List all users."""
    try:
        users = await service.get_all_users()
    except Exception as e:
        return _server_error("list users", e)
    return [UserResponse.from_domain(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UserId, service: UserService = Depends(get_user_service)):
    """Get a user by id. 404 when absent."""
    try:
        user = await service.get_user_by_id(user_id)
    except Exception as e:
        return _server_error("get user", e, userId=user_id)

    if user is None:
        return _message(status.HTTP_404_NOT_FOUND, "User not found")
    return UserResponse.from_domain(user)


async def _create(request: UserRequest, service: UserService):
    try:
        user = await service.create_user(request.to_fields())
    except Exception as e:
        return _server_error("create user", e, email=request.email)
    return UserResponse.from_domain(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: UserRequest, service: UserService = Depends(get_user_service)):
    """Create a user. The password is stored as a bcrypt hash."""
    return await _create(request, service)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: UserRequest, service: UserService = Depends(get_user_service)):
    """Register a user. Same contract as POST /users."""
    return await _create(request, service)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, service: UserService = Depends(get_user_service)):
    """Check credentials.

    Returns:
        200 with the user on success, 404 for an unknown email,
        401 for a wrong password
    """
    try:
        result = await authenticate(service, request.email, request.password)
    except Exception as e:
        return _server_error("log in", e, email=request.email)

    if isinstance(result, UserNotFound):
        return _message(status.HTTP_404_NOT_FOUND, "User not found")
    if isinstance(result, InvalidPassword):
        return _message(status.HTTP_401_UNAUTHORIZED, "Invalid password")

    return LoginResponse(message=LOGIN_SUCCESS_MESSAGE, user=UserResponse.from_domain(result.user))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UserId,
    request: UserRequest,
    service: UserService = Depends(get_user_service),
):
    """Replace all mutable fields of a user. A missing id is a backend failure (500)."""
    try:
        user = await service.update_user(request.to_fields(), user_id)
    except Exception as e:
        return _server_error("update user", e, userId=user_id)
    return UserResponse.from_domain(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: UserId, service: UserService = Depends(get_user_service)):
    """Delete a user. A missing id is a backend failure (500)."""
    try:
        await service.delete_user(user_id)
    except Exception as e:
        return _server_error("delete user", e, userId=user_id)
    return MessageResponse(message=f"User with ID: {user_id} is sucessfully deleted")
