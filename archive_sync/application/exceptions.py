"""
Core business exceptions for the archive sync application.

This module defines a hierarchy of custom exceptions to allow for granular
error handling and clear separation of failure domains. Only configuration
errors stop a run; everything else is contained at the day or file level.
"""


class ArchiveSyncError(Exception):
    """Base exception for all component-specific errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(ArchiveSyncError):
    """Raised for errors related to application configuration."""
    pass


class InvalidDateError(ConfigurationError):
    """Raised when a date cannot be parsed or the range is empty."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(ArchiveSyncError):
    """Base class for errors related to external systems (network, disk)."""
    pass


class DownloadError(InfrastructureError):
    """Raised when a file download fails."""
    pass


# --- Domain/Business Logic Errors ---

class DomainError(ArchiveSyncError):
    """Base class for errors related to business logic failures."""
    pass


class VerificationError(DomainError):
    """Raised when a local file cannot be read while testing its integrity."""
    pass


class DeletionError(DomainError):
    """Raised when a corrupt file cannot be removed before re-download."""
    pass


class DispatchError(DomainError):
    """Raised when the download batch for a day fails."""
    pass
