"""WebDAV file resource (DAVNonCollection) implementation."""

import logging
from typing import BinaryIO, final, override

from wsgidav.dav_error import HTTP_FORBIDDEN, DAVError
from wsgidav.dav_provider import DAVNonCollection
from wsgidav.util import get_file_etag

from server.apps.gallery.logic.items import item_path
from server.apps.webdav.resources.base import ItemResourceMixin

logger = logging.getLogger(__name__)


@final
class ItemResource(ItemResourceMixin, DAVNonCollection):
    """WebDAV resource representing a file in the gallery folder.

    Exposes names, dates, sizes and tags. File content is never
    transferred through this resource.
    """

    @override
    def get_content_length(self) -> int | None:
        """Get file size in bytes.

        Returns:
            File size in bytes, None when it cannot be read.
        """
        return self.get_item_metadata().size

    @override
    def get_content_type(self) -> str | None:
        """Get file MIME type.

        Returns:
            MIME type string, None when it cannot be read.
        """
        return self.get_item_metadata().type_identifier

    @override
    def get_etag(self) -> str | None:
        """Get entity tag for the file.

        Derived from the file path, modification time and size, like
        WsgiDAV's own filesystem provider does.

        Returns:
            ETag string (without quotes - WsgiDAV adds them), or None
            if the file cannot be stat'ed.
        """
        file_path = self._operations.storage.path(item_path(self._item))
        try:
            return get_file_etag(file_path)
        except OSError:
            logger.warning('Could not compute ETag for %s', self.path)
            return None

    @override
    def support_etag(self) -> bool:
        """Check if ETag is supported.

        Returns:
            True - ETags come from file attributes.
        """
        return True

    @override
    def support_ranges(self) -> bool:
        """Check if byte ranges are supported.

        Returns:
            False - content is not served.
        """
        return False

    @override
    def get_content(self) -> BinaryIO:
        """Refuse content transfer.

        Raises:
            DAVError: 403 - the gallery bridge only exposes names,
                attributes and tags.
        """
        logger.debug('Content requested for %s, refusing', self.path)
        raise DAVError(HTTP_FORBIDDEN, 'Content transfer is not supported')
