"""Infrastructure layer for gallery app.

This package contains integrations with external systems:
- Local file store rooted at the gallery folder
- Tag store shared by every gallery process
- Type detection for directory entries

Keep infrastructure concerns separate from business logic.
"""
