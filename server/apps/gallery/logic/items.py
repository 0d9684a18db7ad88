"""Translation between host identifiers and gallery paths.

The host never sees filesystem paths. Every item is addressed by an
opaque identifier derived from its path relative to the gallery root:

- the root has the reserved identifier ``ROOT_IDENTIFIER``;
- any other item uses its path segments joined with ``/``.

Identifiers are derived rather than allocated, so there is no table to
keep in sync with the folder. Renaming an item changes its identifier.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeAlias, final

from server.apps.gallery.exceptions import NoSuchItemError, OutsideRootError

# Segments never contain the separator, so no child identifier equals it
ROOT_IDENTIFIER: Final = '/'

_SEPARATOR: Final = '/'
_PARENT_SEGMENT: Final = '..'
_INVALID_SEGMENTS: Final = frozenset(('', '.'))


@final
@dataclass(frozen=True, slots=True)
class RootItem:
    """The gallery folder itself."""

    @property
    def relative_path(self) -> tuple[str, ...]:
        """Path segments from the root (always empty)."""
        return ()

    @property
    def is_root(self) -> bool:
        """Whether this is the root item."""
        return True


@final
@dataclass(frozen=True, slots=True)
class ChildItem:
    """Any file or folder below the gallery root."""

    relative_path: tuple[str, ...]

    def __post_init__(self) -> None:
        """Reject empty paths, which belong to RootItem."""
        if not self.relative_path:
            raise ValueError('ChildItem requires at least one path segment')

    @property
    def is_root(self) -> bool:
        """Whether this is the root item."""
        return False

    @property
    def name(self) -> str:
        """Final path segment."""
        return self.relative_path[-1]


Item: TypeAlias = RootItem | ChildItem

ROOT_ITEM: Final = RootItem()


def item_for_segments(segments: tuple[str, ...]) -> Item:
    """Build the item for a tuple of path segments.

    Args:
        segments: Path segments relative to the root.

    Returns:
        RootItem for an empty tuple, ChildItem otherwise.
    """
    if not segments:
        return ROOT_ITEM
    return ChildItem(segments)


def from_path(
    path: str | os.PathLike[str],
    root: str | os.PathLike[str],
) -> Item:
    """Resolve a filesystem path below root into an item.

    Both paths are resolved (symlinks, '..') before comparison.

    Args:
        path: Absolute or relative filesystem path.
        root: Gallery root folder.

    Returns:
        Item for the path; RootItem when path is root itself.

    Raises:
        OutsideRootError: If path is not root or one of its descendants.
    """
    resolved_root = Path(root).resolve()
    resolved_path = Path(path).resolve()
    try:
        relative = resolved_path.relative_to(resolved_root)
    except ValueError as exc:
        raise OutsideRootError(str(path), str(root)) from exc
    return item_for_segments(relative.parts)


def from_identifier(identifier: str) -> Item:
    """Decode a host identifier into an item.

    Never touches the file store: whether the item exists is checked
    by the caller.

    Args:
        identifier: Identifier previously produced by ``identifier()``.

    Returns:
        Item addressed by the identifier.

    Raises:
        OutsideRootError: If a segment is '..'.
        NoSuchItemError: If the identifier is malformed (empty or '.'
            segments, NUL bytes).
    """
    if identifier == ROOT_IDENTIFIER:
        return ROOT_ITEM

    segments = tuple(identifier.split(_SEPARATOR))
    for segment in segments:
        if segment == _PARENT_SEGMENT:
            raise OutsideRootError(identifier, ROOT_IDENTIFIER)
        if segment in _INVALID_SEGMENTS or '\x00' in segment:
            raise NoSuchItemError(identifier, 'malformed identifier')
    return ChildItem(segments)


def identifier(item: Item) -> str:
    """Encode an item as a host identifier.

    Args:
        item: Item to encode.

    Returns:
        ROOT_IDENTIFIER for the root, joined path segments otherwise.
    """
    if item.is_root:
        return ROOT_IDENTIFIER
    return _SEPARATOR.join(item.relative_path)


def parent_identifier(item: Item) -> str:
    """Identifier of the folder containing item.

    The root is its own parent.

    Args:
        item: Item whose parent is requested.

    Returns:
        Parent identifier.
    """
    return identifier(parent_item(item))


def parent_item(item: Item) -> Item:
    """Item of the folder containing item (the root for the root)."""
    return item_for_segments(item.relative_path[:-1])


def item_path(item: Item) -> str:
    """Storage name of item: the file store name and the tag key.

    Args:
        item: Item to locate.

    Returns:
        Relative path joined with '/', empty string for the root.
    """
    return _SEPARATOR.join(item.relative_path)
