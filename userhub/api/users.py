"""User routes: signup, login and role-gated user management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from userhub.api.auth import get_user_service, require_roles
from userhub.core.errors import ForbiddenError, UserNotFoundError
from userhub.models.user import Role, normalize_email
from userhub.schemas.auth import (
    AuthenticatedIdentity,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SuccessResponse,
)
from userhub.schemas.users import (
    ChangeRoleRequest,
    ChangeRoleResponse,
    ChangeStatusRequest,
    DeleteUserRequest,
    EditUserRequest,
    UserDetails,
    UsersListResponse,
)
from userhub.services.users import UserService

logger = logging.getLogger(__name__)

router = APIRouter()

Users = Annotated[UserService, Depends(get_user_service)]


def _require_self(identity: AuthenticatedIdentity, email: str) -> None:
    """Plain users may only act on their own record."""
    if identity.role is Role.USER and normalize_email(email) != identity.email:
        raise ForbiddenError("Access denied. You can only modify your own account.")


@router.post("/signup", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: SignupRequest, users: Users) -> SuccessResponse:
    """Register a new account with role 'user'."""
    users.signup(
        name=body.name,
        email=body.email,
        password=body.password,
        address=body.address,
    )
    return SuccessResponse(success=True)


@router.post("/login", response_model=LoginResponse)
def login_user(
    body: LoginRequest,
    request: Request,
    response: Response,
    users: Users,
) -> LoginResponse:
    """
    Authenticate with email and password.

    The token is returned in the body and set as an HttpOnly cookie whose
    max-age matches the token lifetime.
    """
    result = users.login(body.email, body.password)
    settings = request.app.state.settings
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=result.token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    return result


@router.get("/", response_model=UserDetails | UsersListResponse)
def get_user(
    identity: Annotated[
        AuthenticatedIdentity,
        Depends(require_roles(Role.ADMIN, Role.MODERATOR, Role.USER)),
    ],
    users: Users,
) -> UserDetails | UsersListResponse:
    """Plain users get their own record; admins and moderators get every user."""
    if identity.role is Role.USER:
        details = users.get_user_details(identity.email)
        if details is None:
            raise UserNotFoundError("Error finding user")
        return details
    return UsersListResponse(users=users.find_all_users())


@router.patch("/change-role", response_model=ChangeRoleResponse)
def change_role(
    body: ChangeRoleRequest,
    _admin: Annotated[AuthenticatedIdentity, Depends(require_roles(Role.ADMIN))],
    users: Users,
) -> ChangeRoleResponse:
    updated = users.update_user(body.email, {"role": body.role})
    logger.info("Role of email=%s changed to %s", body.email, body.role.value)
    return ChangeRoleResponse(role=updated)


@router.patch("/change-status", response_model=SuccessResponse)
def change_status(
    body: ChangeStatusRequest,
    _staff: Annotated[
        AuthenticatedIdentity, Depends(require_roles(Role.ADMIN, Role.MODERATOR))
    ],
    users: Users,
) -> SuccessResponse:
    updated = users.update_user(body.email, {"is_banned": body.is_banned})
    logger.info("Ban status of email=%s set to %s", body.email, body.is_banned)
    return SuccessResponse(success=updated)


@router.delete("/delete-user", response_model=SuccessResponse)
def remove_user(
    body: DeleteUserRequest,
    identity: Annotated[
        AuthenticatedIdentity, Depends(require_roles(Role.ADMIN, Role.USER))
    ],
    users: Users,
) -> SuccessResponse:
    _require_self(identity, body.email)
    removed = users.remove_user(body.email)
    return SuccessResponse(success=removed)


@router.patch("/edit-user", response_model=SuccessResponse)
def edit_user(
    body: EditUserRequest,
    identity: Annotated[AuthenticatedIdentity, Depends(require_roles(Role.USER))],
    users: Users,
) -> SuccessResponse:
    _require_self(identity, body.email)
    fields = body.model_dump(include={"name", "address"}, exclude_unset=True)
    updated = users.update_user(body.email, fields)
    return SuccessResponse(success=updated)
