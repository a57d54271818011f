"""User store: persistence of user records and password-free read projections."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from userhub.core.errors import (
    DuplicateKeyError,
    InternalError,
    UserNotFoundError,
    ValidationFailedError,
)
from userhub.models.user import Role, User, normalize_email
from userhub.schemas.users import UserDetails, UserListItem

logger = logging.getLogger(__name__)

# Fields a partial update may touch. email, id and password_hash are fixed after creation.
UPDATABLE_FIELDS = frozenset({"name", "address", "role", "is_banned"})


def _duplicate_field(exc: IntegrityError) -> str:
    """Best-effort name of the unique column that collided."""
    detail = str(exc.orig).lower()
    if "email" in detail:
        return "email"
    return "field"


class UserRepository:
    """CRUD over the users table. One instance per request-scoped session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, email: str) -> User | None:
        return (
            self.session.query(User)
            .filter(User.email == normalize_email(email))
            .first()
        )

    def find_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def find_all(self) -> list[UserListItem]:
        """All users, password hash projected out."""
        users = self.session.query(User).order_by(User.created_at, User.email).all()
        return [UserListItem.model_validate(u) for u in users]

    def get_projected_by_email(self, email: str) -> UserDetails | None:
        """One user's record with the password hash and id projected out."""
        user = self.find_by_email(email)
        if user is None:
            return None
        return UserDetails.model_validate(user)

    def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        address: str | None = None,
        role: Role = Role.USER,
    ) -> User:
        """
        Insert a new user in its own transaction.

        Raises ValidationFailedError for missing/malformed fields and
        DuplicateKeyError when the email is already taken. Nothing is
        persisted on failure.
        """
        try:
            user = User(
                name=name,
                email=email,
                password_hash=password_hash,
                address=address,
                role=role,
                is_banned=False,
            )
        except ValueError as e:
            raise ValidationFailedError(f"Validation failed: {e}") from e

        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            field = _duplicate_field(e)
            logger.warning("User create rejected: duplicate %s", field)
            raise DuplicateKeyError(field) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Database error while creating user")
            raise InternalError(
                "An unexpected error occurred while creating the user."
            ) from e
        self.session.refresh(user)
        return user

    def update_by_email(self, email: str, fields: Mapping[str, Any]) -> User:
        """
        Apply a partial update: only keys present in fields change.

        The model validators run on every changed field. Raises
        UserNotFoundError when no user has this email.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailedError(
                f"Validation failed: cannot update {', '.join(sorted(unknown))}"
            )
        user = self.find_by_email(email)
        if user is None:
            raise UserNotFoundError("User not found")
        try:
            for key, value in fields.items():
                setattr(user, key, value)
            self.session.commit()
        except ValueError as e:
            self.session.rollback()
            raise ValidationFailedError(f"Validation failed: {e}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Database error while updating user")
            raise InternalError("Error updating user") from e
        self.session.refresh(user)
        return user

    def delete_by_email(self, email: str) -> bool:
        """Delete the user with this email. True if a record was removed."""
        try:
            deleted = (
                self.session.query(User)
                .filter(User.email == normalize_email(email))
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Database error while deleting user")
            raise InternalError("Error deleting the user") from e
        return deleted > 0
