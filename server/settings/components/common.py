"""Django settings shared by every process of the gallery."""

from typing import Final

from server.settings.components import BASE_DIR, config

SECRET_KEY = config(
    'DJANGO_SECRET_KEY',
    default='gallery-bridge-insecure-development-key',
)

DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)

ALLOWED_HOSTS: Final = ['localhost', '127.0.0.1']

INSTALLED_APPS: Final = [
    'server.apps.gallery',
    'server.apps.webdav',
]

# The tag database is opened by the host process and by the application
# process at the same time, so it must live on a shared path
DATABASES: Final = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': config(
            'DJANGO_DATABASE_PATH',
            default=str(BASE_DIR.joinpath('gallery.sqlite3')),
        ),
        'OPTIONS': {
            'timeout': 20,
        },
    },
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'
