"""User repository interface.

Extends ``IRepository[User]`` with the email look-up needed to keep
addresses unique.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.users.models import User


class IUserRepository(IRepository["User"]):
    """Repository contract for the User aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by email address."""

    @abstractmethod
    def save(self, entity: User) -> User:
        """Persist (create or update) a user."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Retire a user; ``False`` when there is no live user."""
