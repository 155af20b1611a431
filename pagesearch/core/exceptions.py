"""
Custom exception hierarchy for the Page Search engine.

Provides specific exception types for the failure modes of the store,
the ingestion path, the search path, and PDF extraction. An empty search
result is never an error.
"""


class PageSearchError(Exception):
    """Base exception for all Page Search errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PageSearchError):
    """Raised when configuration is invalid or missing."""
    pass


class NotConfiguredError(PageSearchError):
    """Raised when the store connection cannot be established."""
    pass


class InvalidInputError(PageSearchError):
    """Raised when required fields are missing or malformed."""

    def __init__(self, message: str, field: str = None, details: dict = None):
        """
        Initialize invalid input error.

        Args:
            message: Error description.
            field: Name of the offending field.
            details: Additional context.
        """
        super().__init__(message, details)
        self.field = field


class WriteConflictError(PageSearchError):
    """Raised when an upsert could not be applied after all retries."""
    pass


class DatabaseError(PageSearchError):
    """Raised when SQLite operations fail."""
    pass


class ExtractionError(PageSearchError):
    """Raised when PDF text extraction fails."""

    def __init__(self, message: str, filepath: str = None, details: dict = None):
        """
        Initialize extraction error.

        Args:
            message: Error description.
            filepath: Path to the problematic PDF file.
            details: Additional context.
        """
        super().__init__(message, details)
        self.filepath = filepath
