"""User repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

from modules.core.repositories.interfaces import IRepository


class IUserRepository(IRepository[Any]):
    @abstractmethod
    def username_exists(self, username: str) -> bool:
        """Case-insensitive look-up."""

    @abstractmethod
    def email_exists(self, email: str) -> bool:
        """Case-insensitive look-up."""

    @abstractmethod
    def create_user(self, username: str, email: str, password: str) -> Any:
        """Create an active, non-staff user with a hashed password."""
