"""ORM model for application users (auth and RBAC)."""

import re
import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import validates

from userhub.models.base import Base

NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
ADDRESS_MAX_LEN = 1024

EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$")


class Role(str, Enum):
    """User roles for RBAC."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookups: trimmed and lowercased."""
    return email.strip().lower()


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    Field rules are enforced by the @validates hooks below, so they apply to
    inserts and updates alike. Each hook raises ValueError on bad input.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(NAME_MAX_LEN), nullable=False)
    email = Column(String(EMAIL_MAX_LEN), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SAEnum(
            Role,
            name="user_role",
            native_enum=False,
            length=32,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=Role.USER,
    )
    is_banned = Column(Boolean, nullable=False, default=False)
    address = Column(String(ADDRESS_MAX_LEN), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @validates("name")
    def _validate_name(self, _key: str, value: str | None) -> str:
        if value is None or not str(value).strip():
            raise ValueError("name must be non-empty")
        value = str(value).strip()
        if len(value) > NAME_MAX_LEN:
            raise ValueError(f"name must be at most {NAME_MAX_LEN} characters")
        return value

    @validates("email")
    def _validate_email(self, _key: str, value: str | None) -> str:
        if value is None or not str(value).strip():
            raise ValueError("email must be non-empty")
        if self.email is not None:
            raise ValueError("email cannot be changed")
        value = normalize_email(str(value))
        if len(value) > EMAIL_MAX_LEN or not EMAIL_PATTERN.match(value):
            raise ValueError("email must be a valid email address")
        return value

    @validates("password_hash")
    def _validate_password_hash(self, _key: str, value: str | None) -> str:
        if not value:
            raise ValueError("password must be non-empty")
        return value

    @validates("role")
    def _validate_role(self, _key: str, value: Role | str | None) -> Role:
        if value is None:
            raise ValueError("role must be set")
        try:
            return Role(value)
        except ValueError:
            allowed = ", ".join(r.value for r in Role)
            raise ValueError(f"role must be one of: {allowed}") from None

    @validates("is_banned")
    def _validate_is_banned(self, _key: str, value: bool | None) -> bool:
        if not isinstance(value, bool):
            raise ValueError("isBanned must be true or false")
        return value

    @validates("address")
    def _validate_address(self, _key: str, value: str | None) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        if len(value) > ADDRESS_MAX_LEN:
            raise ValueError(f"address must be at most {ADDRESS_MAX_LEN} characters")
        return value or None
