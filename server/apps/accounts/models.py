"""Database models for accounts app."""

from typing import Final, final, override

from django.contrib.auth.models import AbstractUser
from django.db import models

_FULL_NAME_MAX_LENGTH: Final = 255


@final
class User(AbstractUser):
    """Account owning folders, files and a storage quota."""

    full_name = models.CharField(
        max_length=_FULL_NAME_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Display name shown in the interface',
    )

    class Meta(AbstractUser.Meta):
        """Model metadata."""

        swappable = 'AUTH_USER_MODEL'
        verbose_name = 'User'  # type: ignore[mutable-override]
        verbose_name_plural = 'Users'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return self.username

    @override
    def get_full_name(self) -> str:
        """Return the display name, falling back to the username."""
        return self.full_name or self.username
