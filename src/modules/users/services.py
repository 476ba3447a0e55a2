"""User service layer (Use Cases).

Registration, profile edits, retirement and look-up of shoppers.  The
order workflow depends on ``get_user`` to validate the user referenced by
an order, so a retired user can no longer place or list orders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.users.exceptions import UserAlreadyExists, UserNotFound
from modules.users.models import User

if TYPE_CHECKING:
    from modules.users.dtos import CreateUserDTO, UpdateUserDTO
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserService:
    """Application service for User use-cases.

    Receives an ``IUserRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    def create_user(self, dto: CreateUserDTO) -> User:
        """Register a new user.

        Raises:
            UserAlreadyExists: if the email is already taken.
        """
        if self._repo.get_by_email(dto.email):
            logger.warning("user.duplicate_email")
            raise UserAlreadyExists("Email already registered.")

        user = self._repo.save(User(name=dto.name, email=dto.email))
        logger.info("user.registered", user_id=str(user.id))
        return user

    def update_user(self, id: str, dto: UpdateUserDTO) -> User:
        """Change the name and/or email of a live user.

        Raises:
            UserNotFound: if the user does not exist.
            UserAlreadyExists: if the new email belongs to another user.
        """
        user = self.get_user(id)

        if dto.email is not None:
            holder = self._repo.get_by_email(dto.email)
            if holder is not None and holder.id != user.id:
                logger.warning("user.duplicate_email", user_id=str(user.id))
                raise UserAlreadyExists("Email already registered.")
            user.email = dto.email
        if dto.name is not None:
            user.name = dto.name

        user = self._repo.save(user)
        logger.info("user.updated", user_id=str(user.id))
        return user

    def delete_user(self, id: str) -> None:
        """Retire a user; their orders are kept.

        Raises:
            UserNotFound: if the user does not exist.
        """
        if not id or not self._repo.delete(id):
            raise UserNotFound(f"User {id} not found.")
        logger.info("user.deleted", user_id=str(id))

    def get_user(self, id: str) -> User:
        """Retrieve a single user by ID.

        Raises:
            UserNotFound: if the user does not exist.
        """
        user = self._repo.get_by_id(id) if id else None
        if not user:
            raise UserNotFound(f"User {id} not found.")
        return user
