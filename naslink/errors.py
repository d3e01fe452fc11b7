"""
Error Types

NotFoundError is the only failure a downloader ever sees. StoreError is
fatal for administrative commands and degraded to "not found" by the
serving process. Filesystem failures use the builtin OSError family.
"""


class NaslinkError(Exception):
    """Base class for naslink errors."""


class NotFoundError(NaslinkError):
    """Identifier is unknown or its record was invalidated."""

    def __init__(self, identifier: str = ""):
        super().__init__(f"No valid naslink: {identifier}")
        self.identifier = identifier


class StoreError(NaslinkError):
    """The link database is unreachable or a statement failed."""
