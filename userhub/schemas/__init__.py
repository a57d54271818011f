"""Pydantic request/response schemas."""

from userhub.schemas.auth import (
    AuthenticatedIdentity,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SuccessResponse,
    TokenClaims,
)
from userhub.schemas.health import HealthResponse
from userhub.schemas.users import (
    ChangeRoleRequest,
    ChangeRoleResponse,
    ChangeStatusRequest,
    DeleteUserRequest,
    EditUserRequest,
    UserDetails,
    UserListItem,
    UsersListResponse,
)

__all__ = [
    "AuthenticatedIdentity",
    "ChangeRoleRequest",
    "ChangeRoleResponse",
    "ChangeStatusRequest",
    "DeleteUserRequest",
    "EditUserRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "SignupRequest",
    "SuccessResponse",
    "TokenClaims",
    "UserDetails",
    "UserListItem",
    "UsersListResponse",
]
