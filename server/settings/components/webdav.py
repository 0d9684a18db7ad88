"""WebDAV server settings."""

from server.settings.components import config

# WebDAV server host and port, local only by default
WEBDAV_HOST = config('WEBDAV_HOST', default='127.0.0.1')
WEBDAV_PORT = config('WEBDAV_PORT', cast=int, default=8080)
