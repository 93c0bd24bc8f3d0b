"""dotstore custom exceptions."""


class DotStoreError(Exception):
    """Base exception for dotstore errors."""


class InvalidPathError(DotStoreError):
    """Key is empty or contains an empty segment."""


class NotAnArrayError(DotStoreError):
    """Append target exists and is not an array."""


class CorruptDataError(DotStoreError):
    """Stored bytes could not be decoded as a document."""


class StorageError(DotStoreError):
    """The backing store failed."""


class InvalidDocumentError(DotStoreError):
    """A value is not a storable document."""
