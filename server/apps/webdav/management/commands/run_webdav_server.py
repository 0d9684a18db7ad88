"""Django management command to serve the gallery over WebDAV."""

import logging
import os
import shlex
import sys
from pathlib import Path
from typing import Any, Final, final, override

from cheroot.wsgi import Server as WSGIServer
from django.conf import settings
from django.core.management.base import BaseCommand

from server.apps.gallery.infrastructure.storage import GalleryStorage
from server.apps.gallery.infrastructure.tag_store import DatabaseTagStore
from server.apps.gallery.logic.item_operations import (
    ItemOperations,
    get_item_operations,
)
from server.apps.webdav.wsgi_app import create_webdav_app

logger = logging.getLogger(__name__)

# Set in the child process started by the reloader
_RELOAD_ENV_VAR: Final = 'GALLERY_WEBDAV_RELOADED'
_SERVER_NAME: Final = 'Gallery-WebDAV'
# Options forwarded to the child process, in command line order
_FORWARDED_OPTIONS: Final = ('host', 'port', 'root')


def build_server(
    host: str,
    port: int,
    operations: ItemOperations,
    verbose: int = 1,
) -> WSGIServer:
    """Create the cheroot server for the gallery WebDAV app.

    Args:
        host: Interface to bind to.
        port: Port to bind to.
        operations: ItemOperations to serve.
        verbose: WsgiDAV verbosity level (0-5).

    Returns:
        Configured, not yet started, cheroot server.
    """
    app = create_webdav_app(verbose=verbose, operations=operations)
    server = WSGIServer(bind_addr=(host, port), wsgi_app=app)
    server.server_name = _SERVER_NAME
    return server


@final
class Command(BaseCommand):
    """Serve the gallery folder with cheroot until interrupted."""

    help = 'Serve the gallery folder to file browsers over WebDAV'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Register bind address, gallery folder and reload options.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--host',
            default=None,
            help='Interface to bind (default: WEBDAV_HOST)',
        )
        parser.add_argument(
            '--port',
            default=None,
            type=int,
            help='Port to bind (default: WEBDAV_PORT)',
        )
        parser.add_argument(
            '--root',
            default=None,
            type=Path,
            help='Gallery folder to serve (default: GALLERY_ROOT)',
        )
        parser.add_argument(
            '--verbose',
            default=1,
            type=int,
            choices=range(6),
            help='WsgiDAV verbosity, 0-5 (default: 1)',
        )
        parser.add_argument(
            '--reload',
            action='store_true',
            help='Restart when Python sources change (development)',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Run the server, under a reloader when --reload is given.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        if options['reload'] and os.environ.get(_RELOAD_ENV_VAR) != '1':
            self._watch_and_restart(options)
            return
        self._serve(options)

    def _get_operations(self, root: Path | None) -> ItemOperations:
        if root is None:
            return get_item_operations()
        root.mkdir(parents=True, exist_ok=True)
        return ItemOperations(
            GalleryStorage(location=root),
            DatabaseTagStore(),
            root_display_name=settings.GALLERY_ROOT_DISPLAY_NAME,
        )

    def _serve(self, options: dict[str, Any]) -> None:
        host = options['host'] or settings.WEBDAV_HOST
        port = options['port'] or settings.WEBDAV_PORT
        operations = self._get_operations(options['root'])
        server = build_server(
            host,
            port,
            operations,
            verbose=options['verbose'],
        )

        self.stdout.write(
            self.style.SUCCESS(
                f'Serving {operations.storage.location} '
                f'over WebDAV on {host}:{port}',
            ),
        )
        logger.info('WebDAV server listening on %s:%d', host, port)
        try:
            server.start()
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('\nInterrupted'))
        finally:
            server.stop()
            logger.info('WebDAV server on %s:%d stopped', host, port)
            self.stdout.write(self.style.SUCCESS('WebDAV server stopped'))

    def _watch_and_restart(self, options: dict[str, Any]) -> None:
        """Run the server in a child process restarted on source changes.

        Args:
            options: Command options, forwarded to the child.
        """
        try:
            import watchfiles  # noqa: PLC0415
        except ImportError:
            self.stderr.write(
                self.style.ERROR(
                    '--reload needs watchfiles: pip install -e ".[dev]"',
                ),
            )
            sys.exit(1)

        command = [sys.executable, '-m', 'django', 'run_webdav_server']
        for option in _FORWARDED_OPTIONS:
            if options[option] is not None:
                command.extend((f'--{option}', str(options[option])))
        command.extend(('--verbose', str(options['verbose'])))

        self.stdout.write(
            self.style.SUCCESS('Watching server sources for changes'),
        )
        os.environ[_RELOAD_ENV_VAR] = '1'
        watchfiles.run_process(
            settings.BASE_DIR / 'server',
            target=shlex.join(command),
            target_type='command',
            watch_filter=watchfiles.PythonFilter(),
            callback=self._report_changes,
        )

    def _report_changes(self, changes: set[tuple[Any, str]]) -> None:
        for change, path in sorted(changes, key=lambda entry: entry[1]):
            self.stdout.write(self.style.WARNING(f'{change.name}: {path}'))
        self.stdout.write(self.style.SUCCESS('Restarting WebDAV server'))
