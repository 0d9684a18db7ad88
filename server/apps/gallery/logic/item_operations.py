"""Business logic for host-facing item operations.

Every operation works on a transient Item resolved from a host
identifier and touches two stores that share no transaction:

- the gallery folder (GalleryStorage), the source of truth for existence;
- the tag store, a best-effort side store keyed by relative path.

Mutations check every precondition before changing anything and always
mutate the gallery folder last.
"""

import enum
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Final, TypeVar, final

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation

from server.apps.gallery.exceptions import (
    FilenameCollisionError,
    NoSuchItemError,
    OutsideRootError,
    StoreError,
)
from server.apps.gallery.infrastructure.metadata import (
    detect_type_identifier,
    is_hidden_name,
)
from server.apps.gallery.infrastructure.storage import GalleryStorage
from server.apps.gallery.infrastructure.tag_store import (
    DatabaseTagStore,
    TagStore,
)
from server.apps.gallery.logic.items import (
    ROOT_IDENTIFIER,
    ChildItem,
    Item,
    from_identifier,
    from_path,
    identifier,
    item_path,
)

logger = logging.getLogger(__name__)

_T = TypeVar('_T')

DEFAULT_ROOT_DISPLAY_NAME: Final = 'Gallery'

# Names that would leave the parent folder when used for a rename
_FORBIDDEN_NAMES: Final = frozenset(('', '.', '..'))


class Capability(enum.Enum):
    """Actions the host may offer for an item."""

    ENUMERATE = 'enumerate'
    READ = 'read'
    ADD_CHILD = 'add-child'
    RENAME = 'rename'
    DELETE = 'delete'


_ROOT_CAPABILITIES: Final = frozenset((
    Capability.ENUMERATE,
    Capability.READ,
    Capability.ADD_CHILD,
))
_CHILD_CAPABILITIES: Final = _ROOT_CAPABILITIES | {
    Capability.RENAME,
    Capability.DELETE,
}


@final
@dataclass(frozen=True, slots=True)
class ItemMetadata:
    """Attributes reported to the host; None when unavailable."""

    creation_date: datetime | None
    modification_date: datetime | None
    last_access_date: datetime | None
    size: int | None
    type_identifier: str | None


@final
class ItemOperations:
    """Reads and mutations of gallery items on behalf of the host.

    Holds no per-item state: one instance can serve concurrent requests
    for different items.
    """

    def __init__(
        self,
        storage: GalleryStorage,
        tag_store: TagStore,
        root_display_name: str = DEFAULT_ROOT_DISPLAY_NAME,
    ) -> None:
        """Initialize item operations.

        Args:
            storage: File store rooted at the gallery folder.
            tag_store: Metadata store holding item tags.
            root_display_name: Name shown to the host for the root.
        """
        self._storage = storage
        self._tag_store = tag_store
        self._root_display_name = root_display_name

    @property
    def storage(self) -> GalleryStorage:
        """File store these operations act on."""
        return self._storage

    def resolve(self, item_identifier: str) -> Item:
        """Resolve a host identifier to an existing item.

        The root always resolves, other items must exist in the
        gallery folder.

        Args:
            item_identifier: Identifier sent by the host.

        Returns:
            Resolved item.

        Raises:
            NoSuchItemError: If nothing exists at the identifier.
            OutsideRootError: If the identifier escapes the root.
        """
        item = from_identifier(item_identifier)
        if not item.is_root and not self._exists(item_path(item)):
            logger.debug('Identifier does not resolve: %s', item_identifier)
            raise NoSuchItemError(item_identifier)
        return item

    def is_directory(self, item: Item) -> bool:
        """Check if item is a folder (the root always is)."""
        if item.is_root:
            return True
        return self._storage.is_directory(item_path(item))

    @staticmethod
    def capabilities(item: Item) -> frozenset[Capability]:
        """Actions available for item, without probing the file store."""
        if item.is_root:
            return _ROOT_CAPABILITIES
        return _CHILD_CAPABILITIES

    def display_name(self, item: Item) -> str:
        """Human-readable name: the configured root name or last segment."""
        if isinstance(item, ChildItem):
            return item.name
        return self._root_display_name

    def metadata(self, item: Item) -> ItemMetadata:
        """Fetch the attributes of item.

        Each attribute is read separately. A failed read leaves that
        attribute as None and never fails the whole call.

        Args:
            item: Item to describe.

        Returns:
            ItemMetadata with every attribute that could be read.
        """
        name = item_path(item)
        is_directory = self._fetch(
            name,
            'directory flag',
            self._storage.is_directory,
        )
        size = None
        type_identifier = None
        if is_directory is not None:
            type_identifier = detect_type_identifier(
                name,
                is_directory=is_directory,
            )
            if not is_directory:
                size = self._fetch(name, 'size', self._storage.size)

        return ItemMetadata(
            creation_date=self._fetch(
                name,
                'creation date',
                self._storage.get_created_time,
            ),
            modification_date=self._fetch(
                name,
                'modification date',
                self._storage.get_modified_time,
            ),
            last_access_date=self._fetch(
                name,
                'last access date',
                self._storage.get_accessed_time,
            ),
            size=size,
            type_identifier=type_identifier,
        )

    def tag(self, item: Item) -> bytes | None:
        """Read the tag of item, None when it has none."""
        return self._tag_store.get(item_path(item))

    def set_tag(self, item: Item, tag_value: bytes | None) -> None:
        """Replace the tag of item.

        None or empty bytes remove the tag instead of storing a blob.

        Args:
            item: Item to tag.
            tag_value: New tag, or None/b'' to clear it.
        """
        name = item_path(item)
        logger.info('Setting tag for %s', name or ROOT_IDENTIFIER)
        self._tag_store.set(name, tag_value or None)

    def rename(self, item: Item, new_name: str) -> ChildItem:
        """Rename item inside its folder.

        Preconditions are checked before anything changes. Orphaned
        tags left at the new path are cleared, then tags are migrated
        to it (copied, then cleared from the old path) and the entry
        is moved in the gallery folder. When the move fails the tag
        migration is rolled back.

        Args:
            item: Item to rename.
            new_name: New final path segment.

        Returns:
            The item at its new path, with a new identifier.

        Raises:
            NoSuchItemError: If item is the root, does not exist, or
                new_name would leave the folder.
            FilenameCollisionError: If the new path is already taken.
            StoreError: If the tag store or the gallery folder fails.
        """
        if not isinstance(item, ChildItem):
            raise NoSuchItemError(ROOT_IDENTIFIER, 'the root cannot be renamed')

        renamed = ChildItem(item.relative_path[:-1] + (new_name,))
        source = item_path(item)
        destination = item_path(renamed)

        self._check_inside_root(new_name, destination)
        if not self._exists(source):
            raise NoSuchItemError(identifier(item))
        if self._exists(destination):
            logger.warning('Rename rejected, %s already exists', destination)
            raise FilenameCollisionError(destination)

        logger.info('Renaming item: %s -> %s', source, destination)
        # Nothing exists at destination, any tag stored there is orphaned
        self._clear_tags(destination)
        tag_moves = self._migrate_tags(source, destination)

        try:
            self._storage.move_object(source, destination)
        except FileExistsError as exc:
            self._rollback_tags(tag_moves)
            raise FilenameCollisionError(destination) from exc
        except OSError as exc:
            self._rollback_tags(tag_moves)
            raise StoreError(
                f'Failed to move {source!r} to {destination!r}',
            ) from exc

        logger.info('Renamed item: %s -> %s', source, destination)
        return renamed

    def delete(self, item: Item) -> None:
        """Delete item and, for folders, everything below it.

        Tags are cleared first on a best-effort basis: an orphaned tag
        is harmless, a failed removal is not and is always reported.

        Args:
            item: Item to delete.

        Raises:
            NoSuchItemError: If item is the root or does not exist.
            StoreError: If the gallery folder entry cannot be removed.
        """
        if not isinstance(item, ChildItem):
            raise NoSuchItemError(ROOT_IDENTIFIER, 'the root cannot be deleted')

        name = item_path(item)
        if not self._exists(name):
            raise NoSuchItemError(identifier(item))

        logger.info('Deleting item: %s', name)
        try:
            self._clear_tags(name)
        except StoreError:
            # Orphaned tags are removed by the prune_tags command
            logger.exception('Failed to clear tags (orphaned): %s', name)

        try:
            if self._storage.is_directory(name):
                self._storage.delete_tree(name)
            else:
                self._storage.delete(name)
        except OSError as exc:
            raise StoreError(f'Failed to delete {name!r}') from exc

    def list_children(self, item: Item) -> list[ChildItem]:
        """List the direct children of a folder item.

        Hidden entries (dot-files, macOS metadata) are skipped.

        Args:
            item: Folder item to enumerate.

        Returns:
            Children sorted by name.

        Raises:
            NoSuchItemError: If item is missing or not a folder.
            StoreError: If the folder cannot be read.
        """
        name = item_path(item)
        if not item.is_root and not self._exists(name):
            raise NoSuchItemError(identifier(item))
        if not self.is_directory(item):
            raise NoSuchItemError(identifier(item), 'not a folder')

        try:
            directories, files = self._storage.listdir(name)
        except OSError as exc:
            raise StoreError(
                f'Failed to list {name or ROOT_IDENTIFIER!r}',
            ) from exc

        return [
            ChildItem(item.relative_path + (child_name,))
            for child_name in sorted((*directories, *files))
            if not is_hidden_name(child_name)
        ]

    def prune_orphaned_tags(self, *, dry_run: bool = False) -> list[str]:
        """Remove tags whose item no longer exists in the gallery folder.

        Repairs what an interrupted rename or delete leaves behind.

        Args:
            dry_run: Only report the orphaned keys.

        Returns:
            Keys of the orphaned tags, sorted.
        """
        orphaned = [
            key
            for key in self._tag_store.keys()
            if key and not self._exists(key)
        ]
        if dry_run:
            return orphaned

        for key in orphaned:
            self._tag_store.delete(key)
            logger.info('Pruned orphaned tag: %s', key)
        return orphaned

    def _exists(self, name: str) -> bool:
        try:
            return self._storage.exists(name)
        except SuspiciousFileOperation:
            return False

    def _fetch(
        self,
        name: str,
        attribute: str,
        getter: Callable[[str], _T],
    ) -> _T | None:
        try:
            return getter(name)
        except (OSError, SuspiciousFileOperation):
            logger.warning(
                'Could not read %s of %s',
                attribute,
                name or ROOT_IDENTIFIER,
                exc_info=True,
            )
            return None

    def _check_inside_root(self, new_name: str, destination: str) -> None:
        if (
            new_name in _FORBIDDEN_NAMES
            or '/' in new_name
            or os.sep in new_name
            or '\x00' in new_name
        ):
            raise NoSuchItemError(new_name, 'name leaves the parent folder')
        try:
            from_path(self._storage.path(destination), self._storage.location)
        except (OutsideRootError, SuspiciousFileOperation) as exc:
            raise NoSuchItemError(
                new_name,
                'name resolves outside the root',
            ) from exc

    def _clear_tags(self, name: str) -> None:
        for key in self._tag_store.keys(name):
            self._tag_store.delete(key)
            logger.debug('Cleared tag: %s', key)

    def _migrate_tags(
        self,
        source: str,
        destination: str,
    ) -> list[tuple[str, str]]:
        moves = [
            (key, destination + key[len(source):])
            for key in self._tag_store.keys(source)
        ]
        done: list[tuple[str, str]] = []
        try:
            for old_key, new_key in moves:
                self._move_tag(old_key, new_key)
                done.append((old_key, new_key))
        except StoreError:
            self._rollback_tags(done)
            raise
        return moves

    def _rollback_tags(self, moves: list[tuple[str, str]]) -> None:
        for old_key, new_key in reversed(moves):
            try:
                self._move_tag(new_key, old_key)
            except StoreError:
                logger.exception(
                    'Failed to restore tag %s -> %s',
                    new_key,
                    old_key,
                )

    def _move_tag(self, old_key: str, new_key: str) -> None:
        # Copy before clearing: a crash in between leaves a duplicate,
        # never a lost tag
        self._tag_store.set(new_key, self._tag_store.get(old_key))
        self._tag_store.delete(old_key)


def get_item_operations() -> ItemOperations:
    """Build ItemOperations for the configured gallery folder.

    Creates the gallery folder when it is missing so the root always
    resolves.

    Returns:
        ItemOperations over GalleryStorage and DatabaseTagStore.
    """
    root = settings.GALLERY_ROOT
    os.makedirs(root, exist_ok=True)
    return ItemOperations(
        GalleryStorage(location=root),
        DatabaseTagStore(),
        root_display_name=settings.GALLERY_ROOT_DISPLAY_NAME,
    )
