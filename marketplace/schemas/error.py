"""
Error response schemas for API documentation.
Provides the standardized error envelope for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(
        ...,
        description="Error code identifier",
        examples=["VALIDATION_ERROR"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Name must be at least 2 characters"]
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


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


_DESCRIPTIONS = {
    400: "Validation failed or duplicate resource",
    401: "Missing session or action not permitted",
    404: "Resource not found",
    500: "Unexpected error",
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Build the `responses=` mapping for a route.

    Args:
        status_codes: HTTP status codes the route can fail with

    Returns:
        OpenAPI responses dictionary
    """
    return {
        code: {"model": APIErrorResponse, "description": _DESCRIPTIONS[code]}
        for code in status_codes
    }
