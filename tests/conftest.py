"""Shared fixtures: a gallery folder on disk and an in-memory tag store."""

from pathlib import Path

import pytest

from server.apps.gallery.infrastructure.storage import GalleryStorage
from server.apps.gallery.logic.item_operations import ItemOperations


class MemoryTagStore:
    """In-memory TagStore fake for tests that don't need the database."""

    def __init__(self) -> None:
        """Start with no tags."""
        self.tags: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        """Return the stored tag or None."""
        return self.tags.get(key)

    def set(self, key: str, value: bytes | None) -> None:  # noqa: WPS125
        """Store a tag, deleting the key for empty values."""
        if value:
            self.tags[key] = bytes(value)
        else:
            self.tags.pop(key, None)

    def delete(self, key: str) -> None:
        """Delete a tag if present."""
        self.tags.pop(key, None)

    def keys(self, prefix: str = '') -> list[str]:
        """Return prefix and the keys below it."""
        return sorted(
            key
            for key in self.tags
            if not prefix or key == prefix or key.startswith(f'{prefix}/')
        )


@pytest.fixture
def gallery_root(tmp_path: Path) -> Path:
    """Create an empty gallery folder.

    Returns:
        Path of the gallery root.
    """
    root = tmp_path / 'gallery'
    root.mkdir()
    return root


@pytest.fixture
def sample_tree(gallery_root: Path) -> Path:
    """Populate the gallery folder.

    Layout::

        a/b.txt
        a/c/d.jpg
        scan.png
        .DS_Store

    Returns:
        Path of the gallery root.
    """
    (gallery_root / 'a' / 'c').mkdir(parents=True)
    (gallery_root / 'a' / 'b.txt').write_bytes(b'test file content')
    (gallery_root / 'a' / 'c' / 'd.jpg').write_bytes(b'\xff\xd8\xff')
    (gallery_root / 'scan.png').write_bytes(b'\x89PNG')
    (gallery_root / '.DS_Store').write_bytes(b'')
    return gallery_root


@pytest.fixture
def storage(gallery_root: Path) -> GalleryStorage:
    """Create file store rooted at the gallery folder.

    Returns:
        GalleryStorage instance.
    """
    return GalleryStorage(location=gallery_root)


@pytest.fixture
def tag_store() -> MemoryTagStore:
    """Create empty in-memory tag store.

    Returns:
        MemoryTagStore instance.
    """
    return MemoryTagStore()


@pytest.fixture
def operations(storage, tag_store) -> ItemOperations:
    """Create item operations over the test gallery.

    Returns:
        ItemOperations instance.
    """
    return ItemOperations(storage, tag_store, root_display_name='Scans')
