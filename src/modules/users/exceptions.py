"""User domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class UserAlreadyExists(Exception):
    """A user with the same email already exists."""


class UserNotFound(Exception):
    """The requested user does not exist."""
