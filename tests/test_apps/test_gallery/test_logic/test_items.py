"""Tests for identifier <-> path translation."""

import pytest

from server.apps.gallery.exceptions import NoSuchItemError, OutsideRootError
from server.apps.gallery.logic.items import (
    ROOT_IDENTIFIER,
    ROOT_ITEM,
    ChildItem,
    RootItem,
    from_identifier,
    from_path,
    identifier,
    item_path,
    parent_identifier,
)


class TestFromPath:
    """Tests for from_path."""

    def test_root_itself(self, gallery_root):
        """Test that the root folder resolves to the root item."""
        item = from_path(gallery_root, gallery_root)

        assert item == ROOT_ITEM
        assert item.is_root is True
        assert item.relative_path == ()

    def test_nested_file(self, gallery_root):
        """Test stripping the root prefix."""
        item = from_path(gallery_root / 'a' / 'b.txt', gallery_root)

        assert item == ChildItem(('a', 'b.txt'))
        assert item.is_root is False

    def test_accepts_strings(self, gallery_root):
        """Test that plain strings work as well as Path objects."""
        item = from_path(str(gallery_root / 'scan.png'), str(gallery_root))

        assert item.relative_path == ('scan.png',)

    def test_unrelated_tree(self, gallery_root, tmp_path):
        """Test that a sibling tree is outside the root."""
        with pytest.raises(OutsideRootError):
            from_path(tmp_path / 'elsewhere' / 'file.txt', gallery_root)

    def test_parent_of_root(self, gallery_root):
        """Test that the folder containing the root is outside of it."""
        with pytest.raises(OutsideRootError):
            from_path(gallery_root.parent, gallery_root)

    def test_traversal_is_resolved(self, gallery_root):
        """Test that '..' is resolved before the comparison."""
        with pytest.raises(OutsideRootError):
            from_path(gallery_root / 'a' / '..' / '..' / 'x', gallery_root)

    def test_symlinked_root(self, gallery_root, tmp_path):
        """Test that a symlink to the root resolves like the root."""
        link = tmp_path / 'link'
        link.symlink_to(gallery_root)

        item = from_path(link / 'scan.png', gallery_root)

        assert item.relative_path == ('scan.png',)


class TestFromIdentifier:
    """Tests for from_identifier."""

    def test_root_identifier(self):
        """Test that the reserved identifier is the root."""
        assert from_identifier(ROOT_IDENTIFIER) == ROOT_ITEM

    def test_nested_identifier(self):
        """Test splitting an identifier into segments."""
        item = from_identifier('a/c/d.jpg')

        assert item == ChildItem(('a', 'c', 'd.jpg'))

    def test_does_not_touch_store(self):
        """Test that nonexistent paths still decode."""
        item = from_identifier('never/created.txt')

        assert item.relative_path == ('never', 'created.txt')

    @pytest.mark.parametrize('bad_identifier', [
        '',
        'a//b',
        'a/./b',
        'a/',
        'file\x00.txt',
    ])
    def test_malformed_identifier(self, bad_identifier):
        """Test that malformed identifiers resolve to nothing."""
        with pytest.raises(NoSuchItemError):
            from_identifier(bad_identifier)

    def test_traversal_identifier(self):
        """Test that '..' segments escape the root."""
        with pytest.raises(OutsideRootError):
            from_identifier('a/../../etc/passwd')


class TestIdentifier:
    """Tests for identifier and parent_identifier."""

    def test_root_identifier_is_constant(self, gallery_root):
        """Test root identifier regardless of how the root is built."""
        assert identifier(ROOT_ITEM) == ROOT_IDENTIFIER
        assert identifier(RootItem()) == ROOT_IDENTIFIER
        assert identifier(from_path(gallery_root, gallery_root)) == ROOT_IDENTIFIER
        assert identifier(from_identifier(ROOT_IDENTIFIER)) == ROOT_IDENTIFIER

    def test_child_identifier(self):
        """Test joining segments."""
        assert identifier(ChildItem(('a', 'b.txt'))) == 'a/b.txt'

    def test_child_never_uses_root_identifier(self):
        """Test that no child identifier equals the reserved one."""
        assert identifier(ChildItem(('root',))) != ROOT_IDENTIFIER

    @pytest.mark.parametrize('relative', [
        ('scan.png',),
        ('a', 'b.txt'),
        ('a', 'c', 'd.jpg'),
        ('spaces in name', 'ünïcode.jpg'),
    ])
    def test_round_trip(self, gallery_root, relative):
        """Test path -> item -> identifier -> item keeps the path."""
        item = from_path(gallery_root.joinpath(*relative), gallery_root)

        decoded = from_identifier(identifier(item))

        assert decoded.relative_path == relative

    def test_parent_of_nested(self):
        """Test dropping the last segment."""
        assert parent_identifier(ChildItem(('a', 'c', 'd.jpg'))) == 'a/c'

    def test_parent_of_top_level(self):
        """Test that top-level items have the root as parent."""
        assert parent_identifier(ChildItem(('scan.png',))) == ROOT_IDENTIFIER

    def test_parent_of_root(self):
        """Test that the root is its own parent."""
        assert parent_identifier(ROOT_ITEM) == ROOT_IDENTIFIER


class TestItems:
    """Tests for the item variants."""

    def test_child_requires_segments(self):
        """Test that an empty child path is rejected."""
        with pytest.raises(ValueError, match='at least one'):
            ChildItem(())

    def test_child_name(self):
        """Test final segment as name."""
        assert ChildItem(('a', 'b.txt')).name == 'b.txt'

    def test_item_path(self):
        """Test storage names."""
        assert item_path(ROOT_ITEM) == ''
        assert item_path(ChildItem(('a', 'b.txt'))) == 'a/b.txt'

    def test_items_are_values(self):
        """Test equality and hashing by path."""
        assert ChildItem(('a',)) == ChildItem(('a',))
        assert len({ChildItem(('a',)), ChildItem(('a',)), ROOT_ITEM}) == 2
