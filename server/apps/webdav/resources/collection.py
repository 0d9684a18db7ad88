"""WebDAV folder collection (DAVCollection) implementation."""

import logging
from typing import final, override

from wsgidav.dav_error import HTTP_NOT_FOUND, DAVError
from wsgidav.dav_provider import DAVCollection, DAVNonCollection

from server.apps.gallery.exceptions import ItemError
from server.apps.gallery.logic.item_operations import ItemOperations
from server.apps.gallery.logic.items import Item
from server.apps.webdav import path_mapper
from server.apps.webdav.resources.base import ItemResourceMixin, to_dav_error
from server.apps.webdav.resources.file_resource import ItemResource

logger = logging.getLogger(__name__)


def resource_for_item(
    path: str,
    environ: dict,
    item: Item,
    operations: ItemOperations,
) -> 'ItemCollection | ItemResource':
    """Build the DAV resource for a resolved item.

    Args:
        path: WebDAV path of the item.
        environ: WSGI environ dictionary.
        item: Resolved gallery item.
        operations: ItemOperations serving the request.

    Returns:
        ItemCollection for folders (and the root), ItemResource for files.
    """
    if operations.is_directory(item):
        return ItemCollection(path, environ, item, operations)
    return ItemResource(path, environ, item, operations)


@final
class ItemCollection(ItemResourceMixin, DAVCollection):
    """WebDAV collection representing the gallery root or a subfolder.

    Members are the visible entries of the folder on disk.
    """

    @override
    def get_member_names(self) -> list[str]:
        """Get names of all visible direct children in this folder.

        Returns:
            Sorted list of member names (filenames and folder names).

        Raises:
            DAVError: 404 if the folder vanished, 500 if it is unreadable.
        """
        try:
            children = self._operations.list_children(self._item)
        except ItemError as exc:
            logger.warning('Listing failed for %s: %s', self.path, exc)
            raise to_dav_error(exc) from exc
        return [child.name for child in children]

    @override
    def get_member(self, name: str) -> 'DAVCollection | DAVNonCollection':
        """Get a specific child member by name.

        Args:
            name: Name of the child (file or folder).

        Returns:
            ItemCollection for folders, ItemResource for files.

        Raises:
            DAVError: 404 if the member doesn't exist.
        """
        child_path = path_mapper.join_paths(self.path, name)
        try:
            resolved = self._operations.resolve(
                path_mapper.to_identifier(child_path),
            )
        except ItemError as exc:
            logger.debug('Member not found: %s', child_path)
            raise DAVError(HTTP_NOT_FOUND, f'Member not found: {name}') from exc

        return resource_for_item(
            child_path,
            self.environ,
            resolved,
            self._operations,
        )

    @override
    def support_recursive_delete(self) -> bool:
        """Check if recursive delete is supported.

        Returns:
            True - deleting a folder removes its contents.
        """
        return True

    @override
    def get_etag(self) -> str | None:
        """Get entity tag for folder.

        Folders don't have a stable ETag since their contents change.

        Returns:
            None - no ETag for folders.
        """
        return None
