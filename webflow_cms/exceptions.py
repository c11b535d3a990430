"""
Custom Exception Classes for the Webflow CMS Manager

This module defines custom exceptions for consistent error handling and
error responses across the application. Field-level problems inside the
field codec (unknown types, malformed stored values) never surface as
exceptions; they degrade to defaults or display sentinels instead.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in error responses."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_REQUIRED_FIELD = "VALIDATION_REQUIRED_FIELD"
    SCHEMA_DUPLICATE_SLUG = "SCHEMA_DUPLICATE_SLUG"
    SCHEMA_LOAD_FAILED = "SCHEMA_LOAD_FAILED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CMSError(Exception):
    """Base exception class for all CMS manager exceptions"""

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
# Validation Exceptions
# ============================================================================


class ValidationError(CMSError):
    """Raised when submitted item data fails validation"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        if errors:
            error_details["field_errors"] = errors
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


class RequiredFieldsMissingError(ValidationError):
    """Raised when required fields are empty at submit time"""

    error_code = ErrorCode.VALIDATION_REQUIRED_FIELD

    def __init__(self, errors: list[dict[str, Any]]):
        slugs = ", ".join(e["slug"] for e in errors)
        super().__init__(message=f"Required fields are missing: {slugs}", errors=errors)


class MalformedValueError(CMSError):
    """A stored field value could not be interpreted for its field type"""

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, field_type: str, value: Any):
        super().__init__(
            message=f"Malformed value for field type '{field_type}'",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"field_type": field_type, "value": repr(value)[:100]},
        )


class DuplicateSlugError(CMSError):
    """Raised when a collection schema defines the same slug more than once"""

    error_code = ErrorCode.SCHEMA_DUPLICATE_SLUG

    def __init__(self, slugs: list[str], collection_id: str | None = None):
        details: dict[str, Any] = {"duplicate_slugs": slugs}
        if collection_id:
            details["collection_id"] = collection_id
        super().__init__(
            message=f"Field schema contains duplicate slugs: {', '.join(slugs)}",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CMSError):
    """Raised when Webflow has no such site, collection or item"""

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


# ============================================================================
# Webflow Provider Exceptions
# ============================================================================


class WebflowAPIError(CMSError):
    """Raised when the Webflow API returns an error or cannot be reached"""

    error_code = ErrorCode.PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        upstream_status: int | None = None,
        upstream_body: Any | None = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
    ):
        details: dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        if upstream_body is not None:
            details["upstream_body"] = upstream_body
        super().__init__(message=message, status_code=status_code, details=details)


class WebflowTimeoutError(WebflowAPIError):
    """Raised when a Webflow API request times out"""

    error_code = ErrorCode.PROVIDER_TIMEOUT

    def __init__(self, operation: str | None = None):
        super().__init__(
            message="Webflow API request timed out",
            operation=operation,
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        )


class ProviderNotConfiguredError(CMSError):
    """Raised when no Webflow access token is configured"""

    error_code = ErrorCode.PROVIDER_NOT_CONFIGURED

    def __init__(self, message: str = "WEBFLOW_ACCESS_TOKEN not configured on server"):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class SchemaLoadError(CMSError):
    """Raised when a collection field schema could not be loaded by any fallback"""

    error_code = ErrorCode.SCHEMA_LOAD_FAILED

    def __init__(self, collection_id: str, reason: str | None = None):
        details: dict[str, Any] = {"collection_id": collection_id}
        if reason:
            details["reason"] = reason
        super().__init__(
            message="Failed to fetch collection fields",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )
