"""Auth dependencies: service wiring, the authentication gate and role gating."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from userhub.core.database import get_db
from userhub.core.errors import (
    AuthExpiredError,
    AuthInvalidError,
    ForbiddenError,
    InternalError,
    UnauthorizedError,
)
from userhub.core.security import (
    PasswordHasher,
    TokenExpiredError,
    TokenInvalidError,
    TokenService,
)
from userhub.models.user import Role
from userhub.repositories.users import UserRepository
from userhub.schemas.auth import AuthenticatedIdentity
from userhub.services.users import UserService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> UserService:
    """Dependency: UserService bound to the request's DB session."""
    return UserService(UserRepository(db), hasher, tokens)


def _extract_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    """Session cookie first, then an Authorization: Bearer header."""
    token = request.cookies.get(request.app.state.settings.COOKIE_NAME)
    if token:
        return token
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return None


def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    users: Annotated[UserService, Depends(get_user_service)],
) -> AuthenticatedIdentity:
    """
    Dependency: require a valid token and return the caller's identity.

    The user record is re-read on every request, so a ban or role change
    applies immediately even while an older token is still unexpired.
    Raises 401 for a missing/expired/invalid token, an unknown user or a
    banned user; 500 for any unexpected verification failure.
    """
    token = _extract_token(request, credentials)
    if token is None:
        raise UnauthorizedError("Authentication token is missing")
    try:
        claims = tokens.verify(token)
    except TokenExpiredError as e:
        raise AuthExpiredError("Token has expired") from e
    except TokenInvalidError as e:
        raise AuthInvalidError("Invalid token or signature") from e
    except Exception as e:
        logger.exception("Token verification error")
        raise InternalError("Something went wrong with token verification") from e

    user = users.find_by_email(claims.email)
    if user is None:
        raise UnauthorizedError("User not found")
    if user.is_banned:
        logger.warning("Request rejected: email=%s is banned", user.email)
        raise UnauthorizedError("User has been banned")
    return AuthenticatedIdentity(email=user.email, role=user.role)


def is_authorized(role: Role | None, required: frozenset[Role]) -> bool:
    """True when a resolved role is one of the required roles. No role is never authorized."""
    if role is None:
        return False
    return Role(role) in required


def require_roles(*roles: Role) -> Callable[..., AuthenticatedIdentity]:
    """
    Dependency factory: authenticate, then require one of the given roles.

    Usage: identity: Annotated[AuthenticatedIdentity, Depends(require_roles(Role.ADMIN))]
    """
    required = frozenset(roles)

    def dependency(
        identity: Annotated[AuthenticatedIdentity, Depends(get_current_identity)],
    ) -> AuthenticatedIdentity:
        if not is_authorized(identity.role, required):
            raise ForbiddenError("Access denied. Insufficient role.")
        return identity

    return dependency
