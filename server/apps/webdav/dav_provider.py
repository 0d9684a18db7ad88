"""Main WsgiDAV provider for the gallery.

This module provides the DAVProvider that bridges WsgiDAV with the
gallery item operations: DAV paths are translated to identifiers and
resolved against the gallery folder.
"""

import logging
from typing import final, override

from wsgidav.dav_provider import DAVCollection, DAVNonCollection, DAVProvider

from server.apps.gallery.exceptions import ItemError
from server.apps.gallery.logic.item_operations import (
    ItemOperations,
    get_item_operations,
)
from server.apps.webdav import path_mapper
from server.apps.webdav.resources.collection import resource_for_item

logger = logging.getLogger(__name__)


@final
class GalleryDAVProvider(DAVProvider):
    """WsgiDAV provider for the gallery folder.

    Maps WebDAV requests to ItemOperations. The host only ever sees
    paths built from item identifiers.
    """

    @override
    def __init__(self, operations: ItemOperations | None = None) -> None:
        """Initialize the DAV provider.

        Args:
            operations: ItemOperations to serve; built from settings
                when omitted.
        """
        super().__init__()
        self._operations = operations or get_item_operations()

    @property
    def operations(self) -> ItemOperations:
        """Item operations serving this provider."""
        return self._operations

    @override
    def get_resource_inst(
        self,
        path: str,
        environ: dict,
    ) -> DAVCollection | DAVNonCollection | None:
        """Get resource instance for a given path.

        Returns an ItemCollection for folders (and the root), an
        ItemResource for files, or None if the path doesn't resolve.

        Args:
            path: WebDAV path requested.
            environ: WSGI environ dictionary.

        Returns:
            DAV resource instance, or None if not found.
        """
        # Validate path for security
        if not path_mapper.validate_path(path):
            logger.warning('Invalid path rejected: %s', path)
            return None

        logger.debug('Getting resource for path: %s', path)

        try:
            item = self._operations.resolve(path_mapper.to_identifier(path))
        except ItemError:
            logger.debug('Resource not found: %s', path)
            return None

        return resource_for_item(path, environ, item, self._operations)

    @override
    def is_readonly(self) -> bool:
        """Check if the provider is read-only.

        Returns:
            False - renames, deletions and tag updates are supported.
        """
        return False
