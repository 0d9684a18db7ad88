"""Tag store: the metadata store shared between gallery processes.

Tags are opaque blobs keyed by an item's relative path. The host process
and the application process both reach the same database, so a tag set
by one is visible to the other on its next read.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, final

from django.db import DatabaseError
from django.db.models import Q
from django.db.models.functions import Substr

from server.apps.gallery.exceptions import StoreError
from server.apps.gallery.models import ItemTag

logger = logging.getLogger(__name__)


class TagStore(Protocol):
    """Key -> bytes mapping holding at most one blob per key.

    ``set(key, None)`` and ``set(key, b'')`` delete the key.
    """

    def get(self, key: str) -> bytes | None:
        """Return the blob stored for key, or None."""

    def set(self, key: str, value: bytes | None) -> None:  # noqa: WPS125
        """Store value for key, deleting the key for empty values."""

    def delete(self, key: str) -> None:
        """Delete key, if present."""

    def keys(self, prefix: str = '') -> list[str]:
        """Return prefix itself and every key below ``prefix/``.

        An empty prefix returns every key.
        """


@contextmanager
def _store_errors(operation: str, key: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as exc:
        logger.exception('Tag store %s failed for: %s', operation, key)
        raise StoreError(f'Tag store {operation} failed for {key!r}') from exc


@final
class DatabaseTagStore:
    """TagStore backed by the ItemTag model."""

    def get(self, key: str) -> bytes | None:
        """Read the tag stored for a path.

        Args:
            key: Relative path of the item.

        Returns:
            Tag bytes, or None when the item has no tag.

        Raises:
            StoreError: If the database query fails.
        """
        with _store_errors('read', key):
            value = (
                ItemTag.objects.filter(path=key)
                .values_list('value', flat=True)
                .first()
            )
        if value is None:
            return None
        # Some backends hand BinaryField values back as memoryview
        return bytes(value)

    def set(self, key: str, value: bytes | None) -> None:  # noqa: WPS125
        """Store the tag for a path.

        Args:
            key: Relative path of the item.
            value: Tag bytes. None or empty bytes removes the tag.

        Raises:
            StoreError: If the database write fails.
        """
        if not value:
            self.delete(key)
            return

        with _store_errors('write', key):
            ItemTag.objects.update_or_create(
                path=key,
                defaults={'value': bytes(value)},
            )
        logger.debug('Stored tag for %s (%d bytes)', key, len(value))

    def delete(self, key: str) -> None:
        """Remove the tag for a path.

        Args:
            key: Relative path of the item.

        Raises:
            StoreError: If the database delete fails.
        """
        with _store_errors('delete', key):
            deleted, _ = ItemTag.objects.filter(path=key).delete()
        if deleted:
            logger.debug('Removed tag for %s', key)

    def keys(self, prefix: str = '') -> list[str]:
        """List tagged paths at or below prefix.

        Args:
            prefix: Relative path of a folder, or '' for every key.

        Returns:
            Sorted list of keys.

        Raises:
            StoreError: If the database query fails.
        """
        queryset = ItemTag.objects.all()
        if prefix:
            # Case-sensitive prefix match, SQLite LIKE ignores ASCII case
            folder_prefix = f'{prefix}/'
            queryset = queryset.annotate(
                path_head=Substr('path', 1, len(folder_prefix)),
            ).filter(Q(path=prefix) | Q(path_head=folder_prefix))
        with _store_errors('listing', prefix):
            return list(
                queryset.order_by('path').values_list('path', flat=True),
            )
