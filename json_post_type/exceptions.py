"""
Custom Exception Classes for JSON Post Type

This module defines custom exceptions for consistent error responses
across the REST API and the admin screens.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in the error envelope."""

    AUTH_FAILED = "AUTH_FAILED"
    AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_POST_NOT_FOUND = "RESOURCE_POST_NOT_FOUND"
    RESOURCE_POST_TYPE_NOT_FOUND = "RESOURCE_POST_TYPE_NOT_FOUND"
    RESOURCE_REVISION_NOT_FOUND = "RESOURCE_REVISION_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_JSON_DOCUMENT = "INVALID_JSON_DOCUMENT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class JSONPostTypeException(Exception):
    """Base exception class for all application exceptions"""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(JSONPostTypeException):
    """Raised when authentication fails"""

    error_code = ErrorCode.AUTH_FAILED

    def __init__(self, message: str = "Authentication failed", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or expired"""

    error_code = ErrorCode.AUTH_INVALID_TOKEN

    def __init__(self, message: str = "Invalid or malformed token"):
        super().__init__(message=message)


class AuthorizationError(JSONPostTypeException):
    """Raised when a user lacks a capability for an action"""

    error_code = ErrorCode.AUTH_PERMISSION_DENIED

    def __init__(
        self,
        message: str = "Sorry, you are not allowed to do that.",
        required_capability: str | None = None,
    ):
        details = {"required_capability": required_capability} if required_capability else {}
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(JSONPostTypeException):
    """Base class for resource not found errors"""

    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class PostNotFoundError(ResourceNotFoundError):
    """Raised when a post is not found"""

    error_code = ErrorCode.RESOURCE_POST_NOT_FOUND

    def __init__(self, post_id: Any | None = None):
        super().__init__(resource_type="Post", resource_id=post_id)


class PostTypeNotFoundError(ResourceNotFoundError):
    """Raised when no REST-visible post type matches a name or REST base"""

    error_code = ErrorCode.RESOURCE_POST_TYPE_NOT_FOUND

    def __init__(self, name: Any | None = None):
        super().__init__(resource_type="Post type", resource_id=name)


class RevisionNotFoundError(ResourceNotFoundError):
    """Raised when a revision is not found"""

    error_code = ErrorCode.RESOURCE_REVISION_NOT_FOUND

    def __init__(self, revision_id: Any | None = None):
        super().__init__(resource_type="Revision", resource_id=revision_id)


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(JSONPostTypeException):
    """Raised when input validation fails"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class InvalidJSONDocumentError(ValidationError):
    """Raised in strict mode when post content does not decode as JSON"""

    error_code = ErrorCode.INVALID_JSON_DOCUMENT

    def __init__(self, reason: str):
        super().__init__(message="Content is not a valid JSON document", field="content", details={"reason": reason})
