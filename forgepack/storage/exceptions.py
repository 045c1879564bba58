"""Workspace storage exceptions."""


class StorageError(Exception):
    """Base class for workspace storage errors."""


class StorageValidationError(StorageError):
    """Workspace file failed schema or version validation."""


class StorageChecksumError(StorageError):
    """Workspace file checksum mismatch."""
