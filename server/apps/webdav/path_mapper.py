"""Path translation between WebDAV paths and item identifiers.

WebDAV paths are what the host requests: /scans/page-1.jpg
Identifiers are what the gallery core resolves: scans/page-1.jpg
The DAV root path / maps to the reserved root identifier.
"""

from typing import Final

from server.apps.gallery.logic.items import ROOT_IDENTIFIER

# Character used to split WebDAV paths
_PATH_SEPARATOR: Final = '/'


def to_identifier(webdav_path: str) -> str:
    """Convert WebDAV path to item identifier.

    Args:
        webdav_path: WebDAV path (e.g., /scans/page-1.jpg).

    Returns:
        Identifier (e.g., scans/page-1.jpg), or the root identifier
        for / and the empty path.
    """
    # Normalize the path: remove leading/trailing slashes
    normalized = webdav_path.strip(_PATH_SEPARATOR)

    if not normalized:
        return ROOT_IDENTIFIER

    return normalized


def get_parent_path(webdav_path: str) -> str:
    """Get parent directory of a WebDAV path.

    Args:
        webdav_path: WebDAV path (e.g., /scans/2024/page-1.jpg).

    Returns:
        Parent path (e.g., /scans/2024).
        Returns / for root-level items and for the root itself.
    """
    normalized = webdav_path.strip(_PATH_SEPARATOR)

    if not normalized or _PATH_SEPARATOR not in normalized:
        return _PATH_SEPARATOR

    parent = normalized.rsplit(_PATH_SEPARATOR, 1)[0]
    return _PATH_SEPARATOR + parent


def get_name(webdav_path: str) -> str:
    """Get file or folder name from WebDAV path.

    Args:
        webdav_path: WebDAV path (e.g., /scans/page-1.jpg).

    Returns:
        Name component (e.g., page-1.jpg).
        Returns empty string for root path.
    """
    normalized = webdav_path.strip(_PATH_SEPARATOR)
    return normalized.rsplit(_PATH_SEPARATOR, 1)[-1]


def join_paths(parent: str, name: str) -> str:
    """Join parent path and name to create full WebDAV path.

    Args:
        parent: Parent WebDAV path (e.g., /scans).
        name: Name to append (e.g., page-1.jpg).

    Returns:
        Joined path (e.g., /scans/page-1.jpg).
    """
    parent_normalized = parent.strip(_PATH_SEPARATOR)
    name_normalized = name.strip(_PATH_SEPARATOR)

    if not parent_normalized:
        return _PATH_SEPARATOR + name_normalized

    joined = parent_normalized + _PATH_SEPARATOR + name_normalized
    return _PATH_SEPARATOR + joined


def validate_path(webdav_path: str) -> bool:
    """Validate WebDAV path for security.

    Checks for path traversal attacks and invalid characters.

    Args:
        webdav_path: WebDAV path to validate.

    Returns:
        True if path is valid and safe.
    """
    segments = webdav_path.split(_PATH_SEPARATOR)

    # Check for path traversal attempts
    if '..' in segments:
        return False

    # Check for null bytes
    return '\x00' not in webdav_path
