"""Storage backend for the gallery folder on local disk."""

import logging
import os
import shutil
from typing import final, override

from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)


@final
class GalleryStorage(FileSystemStorage):
    """Local file store rooted at the gallery folder.

    Extends Django's FileSystemStorage with:
    - Directory classification
    - Move without overwrite
    - Recursive removal
    - Logging around every mutation

    Names are relative paths joined with '/', the empty name is the root.
    Django's safe_join refuses names that escape the root folder.
    """

    def is_directory(self, name: str) -> bool:
        """Check if the entry at name is a directory.

        Args:
            name: Storage name (relative path).

        Returns:
            True for directories, False for files and missing entries.
        """
        return os.path.isdir(self.path(name))

    @override
    def delete(self, name: str) -> None:
        """Delete a file or an empty directory with logging.

        Args:
            name: Storage name of the entry to delete.

        Raises:
            OSError: If removal fails.
        """
        try:
            logger.info('Deleting entry from gallery: %s', name)
            super().delete(name)
            logger.info('Successfully deleted entry: %s', name)
        except Exception:
            logger.exception('Failed to delete entry from gallery: %s', name)
            raise

    def delete_tree(self, name: str) -> None:
        """Delete a directory and everything below it.

        Args:
            name: Storage name of the directory.

        Raises:
            OSError: If any part of the tree cannot be removed.
        """
        try:
            logger.info('Deleting directory tree from gallery: %s', name)
            shutil.rmtree(self.path(name))
            logger.info('Successfully deleted directory tree: %s', name)
        except Exception:
            logger.exception('Failed to delete directory tree: %s', name)
            raise

    def move_object(self, source: str, destination: str) -> None:
        """Move/rename an entry inside the gallery.

        Never overwrites: an existing destination is reported as
        FileExistsError. The existence check and the rename are two
        separate system calls, callers must check for collisions first.

        Args:
            source: Source storage name.
            destination: Destination storage name.

        Raises:
            FileExistsError: If destination already exists.
            OSError: If the rename fails.
        """
        source_path = self.path(source)
        destination_path = self.path(destination)
        try:
            logger.info('Moving entry: %s -> %s', source, destination)
            if os.path.lexists(destination_path):
                raise FileExistsError(destination_path)
            os.rename(source_path, destination_path)
            logger.info('Moved entry: %s -> %s', source, destination)
        except Exception:
            logger.exception('Move failed: %s -> %s', source, destination)
            raise
