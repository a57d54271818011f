"""Persistence layer."""

from userhub.repositories.users import UserRepository

__all__ = ["UserRepository"]
