"""Exceptions for gallery app."""


class ItemError(Exception):
    """Base class for failures reported to the host for an item."""


class NoSuchItemError(ItemError):
    """Raised when an identifier does not resolve to an existing entry."""

    def __init__(self, identifier: str, reason: str = 'no such item') -> None:
        """Initialize NoSuchItemError.

        Args:
            identifier: Identifier (or storage name) that failed to resolve.
            reason: Short human-readable explanation.
        """
        self.identifier = identifier
        super().__init__(f'{reason}: {identifier!r}')


class OutsideRootError(ItemError):
    """Raised when a path escapes the managed gallery folder."""

    def __init__(self, path: str, root: str) -> None:
        """Initialize OutsideRootError.

        Args:
            path: Offending path.
            root: Gallery root folder.
        """
        self.path = path
        self.root = root
        super().__init__(f'Path {path!r} is outside of root {root!r}')


class FilenameCollisionError(ItemError):
    """Raised when the destination of a rename already exists."""

    def __init__(self, path: str) -> None:
        """Initialize FilenameCollisionError.

        Args:
            path: Storage name that is already taken.
        """
        self.path = path
        super().__init__(f'An item named {path!r} already exists')


class StoreError(ItemError):
    """Raised when the file store or the tag store fails during a mutation."""
