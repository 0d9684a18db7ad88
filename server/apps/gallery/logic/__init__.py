"""Business logic layer for gallery app.

This package contains the bridge between host identifiers and the
gallery folder:
- Identifier <-> relative path translation (items)
- Rename, delete, metadata and tags of resolved items (item_operations)

Keep it free of protocol concerns: the webdav app adapts it to WebDAV.
"""
