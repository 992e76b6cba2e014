"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["body -> name"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Field required"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["missing"]
    )

    input: Optional[Any] = Field(
        None,
        description="Input value that caused the error"
    )


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(
        ...,
        description="Error code identifier",
        examples=["BAD_REQUEST"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["name and mobile_number are required"]
    )

    timestamp: str = Field(
        ...,
        description="Error timestamp in ISO format",
        examples=["2024-01-01T00:00:00Z"]
    )

    request_id: Optional[str] = Field(
        None,
        description="Unique request identifier for tracking",
        examples=["abc12345"]
    )

    detail: Optional[str] = Field(
        None,
        description="Raw underlying error text for server-side failures"
    )

    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Detailed error information for validation errors"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(
        ...,
        description="Error information"
    )


_DESCRIPTIONS = {
    400: "Bad Request - missing fields or rejected upload",
    404: "Not Found - record does not exist",
    422: "Validation Error - malformed request values",
    500: "Internal Server Error - database failure",
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Build a FastAPI ``responses`` mapping for the given status codes."""
    return {
        code: {"description": _DESCRIPTIONS[code], "model": APIErrorResponse}
        for code in status_codes
        if code in _DESCRIPTIONS
    }


def get_read_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for single record reads."""
    return get_error_responses(404, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for create/update/delete endpoints."""
    return get_error_responses(400, 404, 422, 500)
