class StorageError(Exception):
    """Base exception for settings and stats persistence."""


class PersistenceError(StorageError):
    """Raised when a store cannot write its record to disk."""


class InvalidSettingsError(StorageError):
    """Raised when settings fail validation on save."""
