from typing import Any, Dict, Optional


class BookingEngineError(Exception):
    """Base error for the booking engine."""
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BookingEngineError):
    """Raised when a required field is missing or malformed."""
    status_code = 400


class NotFoundError(BookingEngineError):
    """Raised when a mandatory lookup finds nothing."""
    status_code = 404


class ConflictError(BookingEngineError):
    """Raised when an interval overlaps an existing booking or block."""
    status_code = 409

    def __init__(self, message: str, conflicts=None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.conflicts = list(conflicts or [])


class StorageError(BookingEngineError):
    """Raised when the persistence layer fails."""
    status_code = 500
