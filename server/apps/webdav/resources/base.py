"""Behaviour shared by WebDAV resources backed by gallery items."""

import base64
import binascii
import logging
from typing import Any, Final

from wsgidav.dav_error import (
    HTTP_BAD_REQUEST,
    HTTP_FORBIDDEN,
    HTTP_INTERNAL_ERROR,
    HTTP_NOT_FOUND,
    HTTP_PRECONDITION_FAILED,
    DAVError,
)

from server.apps.gallery.exceptions import (
    FilenameCollisionError,
    ItemError,
    NoSuchItemError,
    OutsideRootError,
)
from server.apps.gallery.logic.item_operations import (
    ItemMetadata,
    ItemOperations,
)
from server.apps.gallery.logic.items import Item, parent_identifier
from server.apps.webdav import path_mapper

logger = logging.getLogger(__name__)

# Dead property carrying the item tag as base64 text
TAG_PROPERTY: Final = '{urn:gallery-bridge:}tag'

_STATUS_FOR_ERROR: Final = (
    (FilenameCollisionError, HTTP_PRECONDITION_FAILED),
    (NoSuchItemError, HTTP_NOT_FOUND),
    (OutsideRootError, HTTP_FORBIDDEN),
)


def to_dav_error(exc: ItemError) -> DAVError:
    """Translate a gallery failure into the DAVError sent to the host.

    Args:
        exc: Failure raised by ItemOperations.

    Returns:
        DAVError with 412 for collisions, 404 for missing items,
        403 for paths outside the gallery and 500 otherwise.
    """
    for error_class, status in _STATUS_FOR_ERROR:
        if isinstance(exc, error_class):
            return DAVError(status, str(exc))
    return DAVError(HTTP_INTERNAL_ERROR, str(exc))


class ItemResourceMixin:
    """Maps DAV resource calls to ItemOperations for one item.

    Mixed into DAVCollection and DAVNonCollection subclasses, which
    provide ``path`` and the rest of the resource protocol.
    """

    path: str

    def __init__(
        self,
        path: str,
        environ: dict,
        item: Item,
        operations: ItemOperations,
    ) -> None:
        """Initialize item resource.

        Args:
            path: WebDAV path of the item.
            environ: WSGI environ dictionary.
            item: Resolved gallery item.
            operations: ItemOperations serving the request.
        """
        super().__init__(path, environ)  # type: ignore[call-arg]
        self._item = item
        self._operations = operations
        self._metadata: ItemMetadata | None = None

    @property
    def item(self) -> Item:
        """Gallery item behind this resource."""
        return self._item

    def get_item_metadata(self) -> ItemMetadata:
        """Item attributes, read once per resource instance."""
        if self._metadata is None:
            self._metadata = self._operations.metadata(self._item)
        return self._metadata

    def get_display_name(self) -> str:
        """Get the name shown by the host."""
        return self._operations.display_name(self._item)

    def get_creation_date(self) -> float | None:
        """Get creation timestamp, None when unavailable."""
        creation_date = self.get_item_metadata().creation_date
        if creation_date is None:
            return None
        return creation_date.timestamp()

    def get_last_modified(self) -> float | None:
        """Get modification timestamp, None when unavailable."""
        modification_date = self.get_item_metadata().modification_date
        if modification_date is None:
            return None
        return modification_date.timestamp()

    def delete(self) -> None:
        """Delete the item, recursively for folders.

        Raises:
            DAVError: 403 for the root, 404 if the item vanished,
                500 if the gallery folder refused the removal.
        """
        if self._item.is_root:
            raise DAVError(HTTP_FORBIDDEN, 'The gallery root cannot be deleted')

        logger.info('Deleting item via WebDAV: %s', self.path)
        try:
            self._operations.delete(self._item)
        except ItemError as exc:
            logger.warning('Delete failed for %s: %s', self.path, exc)
            raise to_dav_error(exc) from exc

    def handle_move(self, dest_path: str) -> bool:
        """Handle MOVE natively as a rename inside the same folder.

        Renames never overwrite: an existing destination is rejected
        whatever the Overwrite header says.

        Args:
            dest_path: Destination WebDAV path.

        Returns:
            True - the move is always handled here.

        Raises:
            DAVError: 403 for the root or a destination in another
                folder, 412 if the destination exists, 404 if the item
                vanished, 500 if the gallery folder failed.
        """
        if self._item.is_root:
            raise DAVError(HTTP_FORBIDDEN, 'The gallery root cannot be renamed')

        dest_parent = path_mapper.to_identifier(
            path_mapper.get_parent_path(dest_path),
        )
        if dest_parent != parent_identifier(self._item):
            logger.warning(
                'Move rejected, %s -> %s changes folder',
                self.path,
                dest_path,
            )
            raise DAVError(
                HTTP_FORBIDDEN,
                'Items can only be renamed inside their folder',
            )

        new_name = path_mapper.get_name(dest_path)
        logger.info('Renaming item via WebDAV: %s -> %s', self.path, new_name)
        try:
            self._operations.rename(self._item, new_name)
        except ItemError as exc:
            logger.warning('Rename failed for %s: %s', self.path, exc)
            raise to_dav_error(exc) from exc
        return True

    def handle_copy(self, dest_path: str, *, depth_infinity: bool) -> bool:
        """Refuse COPY before WsgiDAV clears an existing destination.

        Copying needs content transfer, which the gallery doesn't offer.

        Args:
            dest_path: Destination WebDAV path.
            depth_infinity: Whether the copy is recursive.

        Raises:
            DAVError: 403 - copies are never made.
        """
        logger.warning('Copy rejected: %s -> %s', self.path, dest_path)
        raise DAVError(HTTP_FORBIDDEN, 'Items cannot be copied')

    def get_property_names(self, *, is_allprop: bool) -> list[str]:
        """Get property names, adding the tag when the item has one."""
        names = super().get_property_names(  # type: ignore[misc]
            is_allprop=is_allprop,
        )
        if self._operations.tag(self._item) is not None:
            names.append(TAG_PROPERTY)
        return names

    def get_property_value(self, name: str) -> Any:
        """Get a property value, serving the tag from the tag store.

        Args:
            name: Property name in Clark notation.

        Returns:
            Property value; base64 text for the tag.

        Raises:
            DAVError: 404 if the tag is requested but not set.
        """
        if name != TAG_PROPERTY:
            return super().get_property_value(name)  # type: ignore[misc]

        tag_value = self._operations.tag(self._item)
        if tag_value is None:
            raise DAVError(HTTP_NOT_FOUND)
        return base64.b64encode(tag_value).decode('ascii')

    def set_property_value(
        self,
        name: str,
        value: Any,
        dry_run: bool = False,  # noqa: FBT001, FBT002
    ) -> None:
        """Set or remove a property, writing the tag to the tag store.

        Args:
            name: Property name in Clark notation.
            value: XML element with base64 text, or None to remove.
            dry_run: Only validate the request.

        Raises:
            DAVError: 400 if the tag is not valid base64.
        """
        if name != TAG_PROPERTY:
            super().set_property_value(  # type: ignore[misc]
                name,
                value,
                dry_run=dry_run,
            )
            return

        tag_value = None
        if value is not None:
            try:
                tag_value = base64.b64decode(value.text or '', validate=True)
            except binascii.Error as exc:
                raise DAVError(HTTP_BAD_REQUEST, 'Tag must be base64') from exc

        if dry_run:
            return

        try:
            self._operations.set_tag(self._item, tag_value)
        except ItemError as exc:
            logger.warning('Tag update failed for %s: %s', self.path, exc)
            raise to_dav_error(exc) from exc
