"""Business logic services."""

from userhub.services.users import UserService

__all__ = ["UserService"]
