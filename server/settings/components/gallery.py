"""Gallery folder settings."""

from pathlib import Path

from server.settings.components import BASE_DIR, config

# Folder whose contents are exposed to the host
GALLERY_ROOT = config(
    'GALLERY_ROOT',
    cast=Path,
    default=str(BASE_DIR.joinpath('gallery')),
)

# Name shown by the host for the gallery root
GALLERY_ROOT_DISPLAY_NAME = config(
    'GALLERY_ROOT_DISPLAY_NAME',
    default='Gallery',
)
