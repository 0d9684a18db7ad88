"""Django app configuration for WebDAV app."""

from django.apps import AppConfig


class WebDAVConfig(AppConfig):
    """Configuration for the WebDAV host surface of the gallery."""

    name = 'server.apps.webdav'
    verbose_name = 'Gallery WebDAV'
