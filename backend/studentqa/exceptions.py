from typing import Optional, Dict, Any


class AppException(Exception):
    """Base class for all application exceptions."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 'UNKNOWN_ERROR'
        self.details = details or {}


class DatabaseException(AppException):
    """Exception raised when database operation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code='DATABASE_ERROR', details=details)


class ValidationException(AppException):
    """Exception raised when input validation fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code='VALIDATION_ERROR', details=details)


class NotFoundException(AppException):
    """Exception raised when a requested record does not exist."""

    def __init__(self, resource: str, resource_id: Any, details: Optional[Dict[str, Any]] = None):
        self.resource = resource
        self.resource_id = resource_id
        not_found_details = details or {}
        not_found_details.update({'resource': resource, 'id': resource_id})
        super().__init__(
            message=f"{resource} with ID {resource_id} does not exist",
            error_code='NOT_FOUND',
            details=not_found_details
        )


class PermissionDeniedException(AppException):
    """Exception raised when the acting user may not modify a record."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code='PERMISSION_DENIED', details=details)
