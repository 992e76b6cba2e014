"""
Custom exception classes for the listings API.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
        error_detail: Optional[str] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        # Raw underlying error text, surfaced for diagnostics
        self.error_detail = error_detail


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[Any] = None):
        detail = f"{resource} not found"
        if resource_id is not None:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="BAD_REQUEST"
        )


class InternalServerError(APIException):
    """Internal server error exception."""

    def __init__(self, detail: str = "Internal server error", error_detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="INTERNAL_SERVER_ERROR",
            error_detail=error_detail
        )


class MissingFieldsError(BadRequestError):
    """Required request fields missing."""

    def __init__(self, fields: List[str]):
        self.fields = fields
        if len(fields) == 1:
            message = f"{fields[0]} is required"
        else:
            message = f"{', '.join(fields[:-1])} and {fields[-1]} are required"
        super().__init__(message)


# Resource specific exceptions
class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self, property_id: Any):
        super().__init__("Property", property_id)


class AgentNotFoundError(NotFoundError):
    """Agent not found exception."""

    def __init__(self, agent_id: Any):
        super().__init__("Agent", agent_id)


# File upload exceptions
class FileUploadError(BadRequestError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(BadRequestError):
    """Unsupported file type exception."""

    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(BadRequestError):
    """File size exceeded exception."""

    def __init__(self, size: int, max_size: int):
        max_mb = max_size / (1024 * 1024)
        super().__init__(
            f"Image file size {size} bytes exceeds the {max_mb:.0f}MB limit. "
            f"Please upload a smaller file."
        )


class TooManyFilesError(BadRequestError):
    """Too many files in one upload."""

    def __init__(self, count: int, limit: int):
        super().__init__(f"Maximum {limit} images allowed per upload, got {count}")
