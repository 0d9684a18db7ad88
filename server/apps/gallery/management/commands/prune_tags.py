"""Management command to remove tags of items that no longer exist."""

import logging
from typing import Any

from django.core.management.base import BaseCommand

from server.apps.gallery.exceptions import StoreError
from server.apps.gallery.logic.item_operations import get_item_operations

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete tags left behind by interrupted renames and deletions."""

    help = 'Remove tags whose item is missing from the gallery folder'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be removed without removing',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the prune command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        operations = get_item_operations()

        self.stdout.write(
            f'Looking for orphaned tags in {operations.storage.location}',
        )

        try:
            orphaned = operations.prune_orphaned_tags(dry_run=dry_run)
        except StoreError as exc:
            self.stderr.write(f'Failed to prune tags: {exc}')
            logger.exception('Failed to prune orphaned tags')
            raise

        if dry_run:
            for key in orphaned:
                self.stdout.write(f'Would remove tag: {key}')
            self.stdout.write(
                self.style.SUCCESS(f'Would prune {len(orphaned)} tags'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(f'Pruned {len(orphaned)} tags'),
            )
