"""
This is a django-split-settings main file.

For more information read this:
https://github.com/sobolevn/django-split-settings

Components are loaded in order, later ones can use names defined
by earlier ones.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/gallery.py',
    'components/webdav.py',
)
