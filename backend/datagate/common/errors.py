"""
Error Definitions

Defines custom exception classes used in the application for unified error handling.
Every error renders to the same envelope: {"error": {"code", "http_code", "message"}}.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, containing error message, type, code and HTTP status.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self, include_details: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary format (for API response)

        Args:
            include_details: Whether to include extra details

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "code": self.code,
                "http_code": self.status_code,
                "message": self.message,
            }
        }
        if include_details and self.details:
            result["error"]["details"] = self.details
        return result


class ErrorException(AppError):
    """
    Response Error

    Raised by BaseResponse.response_error with one of the fixed status codes.
    """

    def __init__(self, message: str, status_code: int = 404):
        super().__init__(
            message=message,
            error_type="response_error",
            code=_CODES_BY_STATUS.get(status_code, "error"),
            status_code=status_code,
        )


class NotFoundError(AppError):
    """
    Resource Not Found Error

    Raised when requested resource does not exist.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        code: str = "not_found",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="not_found_error",
            code=code,
            details=details,
            status_code=404,
        )


class ConflictError(AppError):
    """
    Resource Conflict Error

    Raised when resource already exists (e.g., duplicate name).
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        code: str = "conflict",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="conflict_error",
            code=code,
            details=details,
            status_code=409,
        )


class ValidationError(AppError):
    """
    Parameter Validation Error

    Raised when request parameters do not meet requirements.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        code: str = "validation_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="validation_error",
            code=code,
            details=details,
            status_code=422,
        )


class StorageError(AppError):
    """
    Storage Error

    Raised when a file cannot be written to or read from a disk.
    """

    def __init__(
        self,
        message: str = "Storage error",
        code: str = "storage_error",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="storage_error",
            code=code,
            details=details,
            status_code=500,
        )


_CODES_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}
