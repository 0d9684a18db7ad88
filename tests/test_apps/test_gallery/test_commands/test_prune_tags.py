"""Tests for prune_tags management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from server.apps.gallery.models import ItemTag


@pytest.fixture
def configured_gallery(settings, sample_tree):
    """Point the settings at the sample gallery.

    Returns:
        Path of the gallery root.
    """
    settings.GALLERY_ROOT = sample_tree
    return sample_tree


@pytest.mark.django_db
class TestPruneTagsCommand:
    """Tests for prune_tags management command."""

    def test_prune_removes_orphans(self, configured_gallery):
        """Test that tags of missing items are removed."""
        ItemTag.objects.create(path='a/b.txt', value=b'kept')
        ItemTag.objects.create(path='gone.txt', value=b'orphan')

        out = StringIO()
        call_command('prune_tags', stdout=out)

        assert list(ItemTag.objects.values_list('path', flat=True)) == [
            'a/b.txt',
        ]
        assert 'Pruned 1 tags' in out.getvalue()

    def test_prune_keeps_root_tag(self, configured_gallery):
        """Test that the root's tag is never orphaned."""
        ItemTag.objects.create(path='', value=b'root')

        out = StringIO()
        call_command('prune_tags', stdout=out)

        assert ItemTag.objects.filter(path='').exists()
        assert 'Pruned 0 tags' in out.getvalue()

    def test_dry_run(self, configured_gallery):
        """Test that dry run lists orphans without removing them."""
        ItemTag.objects.create(path='gone.txt', value=b'orphan')

        out = StringIO()
        call_command('prune_tags', '--dry-run', stdout=out)

        output = out.getvalue()
        assert 'Would remove tag: gone.txt' in output
        assert 'Would prune 1 tags' in output
        assert ItemTag.objects.filter(path='gone.txt').exists()

    def test_creates_missing_gallery(self, settings, tmp_path):
        """Test that a missing gallery folder is created, not an error."""
        settings.GALLERY_ROOT = tmp_path / 'new-gallery'

        out = StringIO()
        call_command('prune_tags', stdout=out)

        assert (tmp_path / 'new-gallery').is_dir()
        assert 'Pruned 0 tags' in out.getvalue()
