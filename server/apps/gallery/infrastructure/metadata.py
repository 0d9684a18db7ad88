"""Metadata helpers for gallery entries."""

import mimetypes
from typing import Final

DIRECTORY_TYPE: Final = 'inode/directory'
_DEFAULT_TYPE: Final = 'application/octet-stream'


def detect_type_identifier(filename: str, *, is_directory: bool) -> str:
    """Detect the type identifier reported to the host.

    Uses Python's built-in mimetypes module to guess the MIME type
    from the filename extension.

    Args:
        filename: Filename with extension.
        is_directory: Whether the entry is a directory.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'inode/directory' for directories and
        'application/octet-stream' if the type cannot be determined.
    """
    if is_directory:
        return DIRECTORY_TYPE
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_TYPE
    return mime_type


def is_hidden_name(name: str) -> bool:
    """Check if an entry should be hidden from enumeration.

    Hides dot-files, which covers macOS metadata files:
    - .DS_Store* (Finder folder settings)
    - ._* (AppleDouble/resource fork files)

    Args:
        name: Entry name to check.

    Returns:
        True if entry should be hidden.
    """
    return name.startswith('.')
