"""Domain errors. Each carries a client-safe message and the HTTP status it maps to."""

from __future__ import annotations


class UserhubError(Exception):
    """Base class for errors that are reported to the client as {"error": message}."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationFailedError(UserhubError):
    """Input is missing or malformed."""

    status_code = 422


class DuplicateKeyError(UserhubError):
    """A unique field collided with an existing record on create."""

    status_code = 409

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"A user with this {field} already exists.")


class AlreadyExistsError(UserhubError):
    status_code = 409


class UserNotFoundError(UserhubError):
    status_code = 404


class NotRegisteredError(UserhubError):
    status_code = 401


class IncorrectPasswordError(UserhubError):
    status_code = 401


class BannedError(UserhubError):
    status_code = 403


class UnauthorizedError(UserhubError):
    """No usable identity on the request."""

    status_code = 401


class AuthExpiredError(UnauthorizedError):
    pass


class AuthInvalidError(UnauthorizedError):
    pass


class ForbiddenError(UserhubError):
    """Identity is known but not allowed to perform the operation."""

    status_code = 403


class InternalError(UserhubError):
    """Unexpected failure; the message is generic and never carries internals."""

    status_code = 500
