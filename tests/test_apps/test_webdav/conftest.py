"""Shared fixtures for WebDAV app tests."""

import pytest

from server.apps.webdav.dav_provider import GalleryDAVProvider


@pytest.fixture
def dav_provider(operations):
    """Create DAV provider over the test gallery.

    Args:
        operations: Item operations fixture.

    Returns:
        GalleryDAVProvider instance.
    """
    return GalleryDAVProvider(operations)


@pytest.fixture
def webdav_environ(dav_provider):
    """Create WSGI environ for an anonymous host request.

    Args:
        dav_provider: DAV provider fixture.

    Returns:
        WSGI environ dictionary.
    """
    return {
        'REQUEST_METHOD': 'PROPFIND',
        'PATH_INFO': '/',
        'SERVER_NAME': 'localhost',
        'SERVER_PORT': '8080',
        'wsgi.input': None,
        'wsgidav.provider': dav_provider,
    }
