"""Database models for gallery app."""

from typing import Final, final, override

from django.db import models

# Relative paths are stored joined with '/'
_PATH_MAX_LENGTH: Final = 1024


@final
class ItemTag(models.Model):
    """Opaque user tag attached to a gallery item.

    Tags are keyed by the item's relative path inside the gallery folder
    (segments joined with '/', empty string for the root). The database
    is shared by every process that serves the gallery, which makes this
    table the cross-process metadata store.

    Rows only exist for items that carry a tag: an empty value is never
    stored, clearing a tag deletes its row.
    """

    path = models.CharField(
        max_length=_PATH_MAX_LENGTH,
        unique=True,
        help_text='Relative path inside the gallery: folder/file.ext',
    )

    value = models.BinaryField(
        help_text='Opaque tag blob set by the host',
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Item tag'  # type: ignore[mutable-override]
        verbose_name_plural = 'Item tags'  # type: ignore[mutable-override]
        ordering = ['path']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.path or "/"}: {len(self.value)} bytes'
