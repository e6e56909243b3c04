"""Custom exceptions for richedit."""


class RicheditError(Exception):
    """Base exception for richedit operations."""


class ParseError(RicheditError):
    """Error while setting up markup parsing."""


class StorageError(RicheditError):
    """Error talking to the object store or its record table."""


class UploadError(StorageError):
    """An image upload did not complete."""
