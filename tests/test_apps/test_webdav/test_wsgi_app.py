"""Tests for the WSGI application factory."""

from wsgiref.util import setup_testing_defaults

import pytest
from wsgidav.wsgidav_app import WsgiDAVApp

from server.apps.webdav.dav_provider import GalleryDAVProvider
from server.apps.webdav.wsgi_app import create_webdav_app


@pytest.fixture
def webdav_app(operations):
    """Create the WebDAV app over the test gallery.

    Returns:
        WsgiDAVApp instance.
    """
    return create_webdav_app(verbose=0, operations=operations)


def _request(app, method, path, **headers):
    environ = {
        'REQUEST_METHOD': method,
        'SCRIPT_NAME': '',
        'PATH_INFO': path,
        **headers,
    }
    setup_testing_defaults(environ)
    statuses = []

    def start_response(status, response_headers, exc_info=None):
        statuses.append(status)

    body = app(environ, start_response)
    try:
        b''.join(body)
    finally:
        if hasattr(body, 'close'):
            body.close()
    return statuses[0]


def test_create_webdav_app(operations, webdav_app):
    """Test that the app serves the gallery at the share root."""
    assert isinstance(webdav_app, WsgiDAVApp)
    provider = webdav_app.provider_map['/']
    assert isinstance(provider, GalleryDAVProvider)
    assert provider.operations is operations


class TestCopyAndMove:
    """Tests for COPY and MOVE sent through the whole app."""

    def test_copy_keeps_existing_destination(self, webdav_app, sample_tree):
        """Test that a refused COPY leaves the overwritten target intact."""
        (sample_tree / 'a' / 'keep.txt').write_bytes(b'keep me')

        status = _request(
            webdav_app,
            'COPY',
            '/a/b.txt',
            HTTP_DESTINATION='http://127.0.0.1/a/keep.txt',
            HTTP_OVERWRITE='T',
        )

        assert status.startswith('403')
        assert (sample_tree / 'a' / 'keep.txt').read_bytes() == b'keep me'
        assert (sample_tree / 'a' / 'b.txt').exists()

    def test_copy_to_new_name(self, webdav_app, sample_tree):
        """Test that COPY never creates a new item."""
        status = _request(
            webdav_app,
            'COPY',
            '/a/b.txt',
            HTTP_DESTINATION='http://127.0.0.1/a/copy.txt',
        )

        assert status.startswith('403')
        assert not (sample_tree / 'a' / 'copy.txt').exists()

    def test_move_keeps_existing_destination(self, webdav_app, sample_tree):
        """Test that MOVE onto an existing item is a collision."""
        (sample_tree / 'a' / 'keep.txt').write_bytes(b'keep me')

        status = _request(
            webdav_app,
            'MOVE',
            '/a/b.txt',
            HTTP_DESTINATION='http://127.0.0.1/a/keep.txt',
            HTTP_OVERWRITE='T',
        )

        assert status.startswith('412')
        assert (sample_tree / 'a' / 'keep.txt').read_bytes() == b'keep me'
        assert (sample_tree / 'a' / 'b.txt').exists()

    def test_move_renames(self, webdav_app, sample_tree):
        """Test a plain rename through MOVE."""
        status = _request(
            webdav_app,
            'MOVE',
            '/a/b.txt',
            HTTP_DESTINATION='http://127.0.0.1/a/renamed.txt',
        )

        assert status.startswith(('201', '204'))
        assert (sample_tree / 'a' / 'renamed.txt').exists()
