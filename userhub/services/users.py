"""Account logic: signup, login and thin delegation of user CRUD to the store."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from userhub.core.errors import (
    AlreadyExistsError,
    BannedError,
    IncorrectPasswordError,
    NotRegisteredError,
    ValidationFailedError,
)
from userhub.core.security import PasswordHasher, TokenService
from userhub.models.user import User
from userhub.repositories.users import UserRepository
from userhub.schemas.auth import LoginResponse
from userhub.schemas.users import UserDetails, UserListItem

logger = logging.getLogger(__name__)


class UserService:
    """
    Orchestrates the user store, password hasher and token service.

    Role checks are not done here; handlers are gated before they call in.
    """

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens

    def signup(
        self,
        name: str,
        email: str,
        password: str,
        address: str | None = None,
    ) -> User:
        """
        Create a plain user with a hashed password.

        Raises AlreadyExistsError if the email is registered. A concurrent
        signup that wins the race surfaces here as DuplicateKeyError from
        the store; either way exactly one record exists.
        """
        logger.info("Signup attempt for email=%s", email)
        if self.repository.find_by_email(email) is not None:
            logger.warning("Signup rejected: email=%s already exists", email)
            raise AlreadyExistsError("User already exists")
        try:
            password_hash = self.hasher.hash(password)
        except ValueError as e:
            raise ValidationFailedError("Validation failed: password must be non-empty") from e
        user = self.repository.create(
            name=name,
            email=email,
            password_hash=password_hash,
            address=address,
        )
        logger.info("User created id=%s email=%s", user.id, user.email)
        return user

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Check credentials and issue a token.

        Order is fixed: unknown email, then ban, then password, so a banned
        account never reveals whether the password was right.
        """
        logger.info("Login attempt for email=%s", email)
        user = self.repository.find_by_email(email)
        if user is None:
            logger.warning("Login rejected: email=%s not registered", email)
            raise NotRegisteredError("User is not registered")
        if user.is_banned:
            logger.warning("Login rejected: email=%s is banned", email)
            raise BannedError("User is banned")
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Login rejected: incorrect password for email=%s", email)
            raise IncorrectPasswordError("Incorrect password")
        token = self.tokens.issue(user.email, user.role)
        return LoginResponse(role=user.role, token=token, email=user.email)

    def find_by_email(self, email: str) -> User | None:
        return self.repository.find_by_email(email)

    def get_user_details(self, email: str) -> UserDetails | None:
        return self.repository.get_projected_by_email(email)

    def find_all_users(self) -> list[UserListItem]:
        return self.repository.find_all()

    def update_user(self, email: str, fields: Mapping[str, Any]) -> bool:
        self.repository.update_by_email(email, fields)
        return True

    def remove_user(self, email: str) -> bool:
        return self.repository.delete_by_email(email)
