"""Custom exception hierarchy for estate-crm."""


class CrmError(Exception):
    """Base exception for all estate-crm errors."""


class EntityNotFoundError(CrmError):
    """Raised when a referenced entity does not exist."""


class ValidationError(CrmError):
    """Raised when an entity fails a domain validation rule."""


class ConfigurationError(CrmError):
    """Raised when configuration is invalid or missing."""


class StorageError(CrmError):
    """Raised when a storage backend cannot read or write a value."""


class RemoteFetchError(CrmError):
    """Raised when a remote snapshot cannot be fetched."""
