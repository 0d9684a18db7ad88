"""WSGI application factory for WebDAV server.

Creates a configured WsgiDAV application serving the gallery folder.
"""

import logging
from typing import Any

from wsgidav import wsgidav_app

from server.apps.gallery.logic.item_operations import ItemOperations
from server.apps.webdav.dav_provider import GalleryDAVProvider

logger = logging.getLogger(__name__)


def create_webdav_app(
    verbose: int = 3,
    operations: ItemOperations | None = None,
) -> wsgidav_app.WsgiDAVApp:
    """Create configured WsgiDAV WSGI application.

    Creates and configures a WsgiDAV application with:
    - GalleryDAVProvider for item operations
    - Anonymous access (the server is meant for a local host process)

    Args:
        verbose: Logging verbosity level (0-5).
        operations: ItemOperations to serve; built from settings
            when omitted.

    Returns:
        Configured WsgiDAV WSGI application.
    """
    config: dict[str, Any] = {
        'provider_mapping': {
            '/': GalleryDAVProvider(operations),
        },
        'simple_dc': {
            'user_mapping': {'*': True},
        },
        'verbose': verbose,
        'logging': {
            'enable': True,
            'enable_loggers': ['wsgidav'],
        },
        # Disable directory browsing HTML interface
        'dir_browser': {
            'enable': False,
        },
        # Enable lock manager for DAV Class 2 compliance
        # Required for macOS Finder write support
        'lock_storage': True,
        # Property manager (in-memory) for dead properties other than tags
        'property_manager': True,
    }

    logger.info('Creating WsgiDAV application for the gallery')

    return wsgidav_app.WsgiDAVApp(config)
