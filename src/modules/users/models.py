"""User model.

The user is referenced by orders and is the account that places them.
Credentials live outside this model (authentication is handled by
``django.contrib.auth``); this record only carries the shopper identity.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class User(SoftDeleteModel):
    """Shopper account.

    ``email`` is normalised to lowercase on save so that look-ups by
    email are case-insensitive.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="users_created_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)
        if is_new:
            logger.info("user_created", user_id=str(self.id))

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"
