"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Every domain exception carries an ErrorCategory so the API layer can
render a structured, user-friendly response without inspecting messages.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    INVALID_REQUEST = "invalid_request"
    INVALID_FILENAME = "invalid_filename"
    FILE_MISSING = "file_missing"
    PERMISSION_DENIED = "permission_denied"
    FILE_LIMIT_EXCEEDED = "file_limit_exceeded"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    ACCESS_DENIED = "access_denied"
    INVALID_LINK = "invalid_link"
    PRINCIPAL_NOT_FOUND = "principal_not_found"
    FILE_NOT_FOUND = "file_not_found"
    FILE_EXISTS = "file_exists"
    UPLOAD_FAILED = "upload_failed"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.INVALID_FILENAME: {
        "title": "Bad Filename",
        "message": "File names must not be empty and must not contain '/' or '..'.",
        "action": "Choose a plain file name and upload again.",
    },
    ErrorCategory.FILE_MISSING: {
        "title": "No File Uploaded",
        "message": "The request did not include a file.",
        "action": "Attach a file in the 'file' field and try again.",
    },
    ErrorCategory.PERMISSION_DENIED: {
        "title": "Permission Denied",
        "message": "Your account is not allowed to manage files.",
        "action": "Contact an administrator if you need file storage.",
    },
    ErrorCategory.FILE_LIMIT_EXCEEDED: {
        "title": "File Limit Exceeded",
        "message": "You have reached the maximum number of stored files.",
        "action": "Delete some files before uploading new ones.",
    },
    ErrorCategory.SIZE_LIMIT_EXCEEDED: {
        "title": "File Size Limit Exceeded",
        "message": "This upload would exceed your storage quota.",
        "action": "Delete some files or upload a smaller file.",
    },
    ErrorCategory.ACCESS_DENIED: {
        "title": "Access Denied",
        "message": "You are not allowed to access this file.",
        "action": "Ask the owner of the file to share it with you.",
    },
    ErrorCategory.INVALID_LINK: {
        "title": "Invalid Link",
        "message": "This download link is invalid or has expired.",
        "action": "Request a new download link.",
    },
    ErrorCategory.PRINCIPAL_NOT_FOUND: {
        "title": "User Not Found",
        "message": "The requested user does not exist.",
        "action": "Check the link and try again.",
    },
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "The requested file could not be found or has been deleted.",
        "action": "Check the file name and try again.",
    },
    ErrorCategory.FILE_EXISTS: {
        "title": "File Exists",
        "message": "A file with this name already exists.",
        "action": "Delete the existing file or choose a different name.",
    },
    ErrorCategory.UPLOAD_FAILED: {
        "title": "Upload Failed",
        "message": "The file could not be stored.",
        "action": "Please try again. If the problem persists, contact support.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    category = ErrorCategory.SYSTEM_ERROR
    http_status_code = 500

    def __init__(
        self,
        message: str = "",
        category: Optional[ErrorCategory] = None,
        original_error: Exception = None,
    ):
        """
        Initialize domain error.

        Args:
            message: Technical error message
            category: Error category, defaults to the class category
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        if category is not None:
            self.category = category
        self.original_error = original_error


class ValidationError(DomainError):
    """
    Raised for user-correctable input problems.

    Carries the name of the offending field so clients can point at it.
    """

    category = ErrorCategory.INVALID_REQUEST
    http_status_code = 400

    def __init__(
        self,
        field: str,
        message: str = "",
        category: Optional[ErrorCategory] = None,
    ):
        super().__init__(message or f"Invalid field: {field}", category)
        self.field = field


class ForbiddenError(DomainError):
    """Raised when quota, privilege or link checks refuse a request."""

    category = ErrorCategory.ACCESS_DENIED
    http_status_code = 403


class NotFoundError(DomainError):
    """Raised when a principal or stored object does not exist."""

    category = ErrorCategory.FILE_NOT_FOUND
    http_status_code = 404


class ConflictError(DomainError):
    """Raised when a file with the same name is already stored."""

    category = ErrorCategory.FILE_EXISTS
    http_status_code = 409


class UploadFailedError(DomainError):
    """
    Raised when an upload could not be confirmed by the storage engine.

    The object may already be partially written; this is never retried.
    """

    category = ErrorCategory.UPLOAD_FAILED
    http_status_code = 500


# ============================================================================
# API helpers
# ============================================================================

def error_body(
    category: ErrorCategory, context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Build the user-facing error body for a category.

    Args:
        category: Error category
        context: Extra keys merged into the body (e.g. the invalid field)

    Returns:
        Dictionary with error information
    """
    error_info = ERROR_MESSAGES.get(
        category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
    )
    body = {
        "error": category.value,
        "title": error_info["title"],
        "message": error_info["message"],
        "action": error_info["action"],
    }
    if context:
        body.update(context)
    return body


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    The technical message is intentionally not included in the body;
    callers log it.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code

    Returns:
        Tuple of (error_dict, status_code)
    """
    return error_body(category, context), status_code


def domain_error_response(error: DomainError) -> tuple[Dict[str, Any], int]:
    """
    Map a domain exception to its structured API response.

    Args:
        error: Raised domain exception

    Returns:
        Tuple of (error_dict, status_code)
    """
    context = None
    if isinstance(error, ValidationError):
        context = {"field": error.field}
    return create_error_response(
        error.category, str(error), context, status_code=error.http_status_code
    )
